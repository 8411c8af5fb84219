"""
conftest.py
-----------
Pytest configuration: puts the project root on sys.path so the suite runs
from a plain checkout as well as from an editable install.
"""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))
