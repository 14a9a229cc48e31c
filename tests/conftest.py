"""Pytest configuration for the mathsh test suite."""

import sys
from pathlib import Path

# Add src directory to path so tests run without installing the package
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
