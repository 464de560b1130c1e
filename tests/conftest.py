"""
Pytest configuration for the kinematics simulation tests.

This file ensures the kinesim package under src/ is importable from tests.
"""

import sys
from pathlib import Path

import pytest

# Add the src directory to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / 'src'))


@pytest.fixture
def baseline_config_path():
    """Path to the bundled baseline scenario."""
    return project_root / 'configs' / 'baseline_config.yaml'
