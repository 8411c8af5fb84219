from qfanalytics.probability.base import ProbabilityDistribution
from qfanalytics.probability.normal import Normal

__all__ = ["ProbabilityDistribution", "Normal"]
