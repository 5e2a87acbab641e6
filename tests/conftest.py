"""Pytest configuration for the rustic test suite."""

import sys
from pathlib import Path

# Add src directory to path so the suite runs without installation
SRC_DIR = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(SRC_DIR))
