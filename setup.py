"""
Setup configuration for the Closed-Form Option Analytics package.

References:
    Black, F., & Scholes, M. (1973). The Pricing of Options and Corporate
    Liabilities. Journal of Political Economy, 81(3), 637-654.
    Gatheral, J., & Jacquier, A. (2014). Arbitrage-free SVI volatility
    surfaces. Quantitative Finance, 14(1), 59-71.
"""
from setuptools import setup, find_packages

setup(
    name="qfanalytics",
    version="1.0.0",
    author="Jose Orlando Bobadilla Fuentes",
    author_email="joseorlandobf@gmail.com",
    description=(
        "Closed-form Black-Scholes Greeks and SVI/SSVI volatility surfaces "
        "with no-arbitrage diagnostics"
    ),
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    packages=find_packages(include=["qfanalytics", "qfanalytics.*"]),
    py_modules=["main"],
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.24.0",
        "pandas>=2.0.0",
        "matplotlib>=3.7.0",
    ],
    extras_require={
        "dev": ["pytest>=7.4.0", "pytest-cov>=4.1.0", "scipy>=1.11.0",
                "black>=23.0"],
    },
    entry_points={
        "console_scripts": ["qfanalytics-demo = main:main"]
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Financial and Insurance Industry",
        "Topic :: Office/Business :: Financial :: Investment",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
)
