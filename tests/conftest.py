"""Pytest fixtures for boxpleat tests."""

import pytest
import sys
from pathlib import Path

# Add repository root to path for imports
ROOT_DIR = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT_DIR))

from boxpleat.config import PleatConfig


@pytest.fixture
def config() -> PleatConfig:
    """Return default configuration (pitch 20)."""
    return PleatConfig()


@pytest.fixture
def rectangle() -> list:
    """Return a 40x20 rectangle."""
    return [(0, 0), (40, 0), (40, 20), (0, 20)]


@pytest.fixture
def l_hexagon() -> list:
    """Return an L-shaped hexagon missing its top-right square."""
    return [(0, 0), (40, 0), (40, 20), (20, 20), (20, 40), (0, 40)]


@pytest.fixture
def plus_shape() -> list:
    """Return a 12-vertex plus with 20 wide arms in a 60x60 box."""
    return [
        (20, 0), (40, 0), (40, 20), (60, 20), (60, 40), (40, 40),
        (40, 60), (20, 60), (20, 40), (0, 40), (0, 20), (20, 20),
    ]


@pytest.fixture
def u_shape() -> list:
    """Return a U with a 20 wide, 40 deep slot opening upward."""
    return [(0, 0), (60, 0), (60, 60), (40, 60), (40, 20), (20, 20), (20, 60), (0, 60)]


@pytest.fixture
def arch() -> list:
    """Return an arch with a 20x20 notch in the bottom edge."""
    return [(0, 0), (20, 0), (20, 20), (40, 20), (40, 0), (60, 0), (60, 40), (0, 40)]


@pytest.fixture
def staircase() -> list:
    """Return a three-step staircase."""
    return [(0, 0), (60, 0), (60, 20), (40, 20), (40, 40), (20, 40), (20, 60), (0, 60)]


@pytest.fixture
def comb() -> list:
    """Return a comb with two 20x20 notches cut into its right side."""
    return [
        (0, 0), (40, 0), (40, 20), (20, 20), (20, 40), (40, 40),
        (40, 80), (20, 80), (20, 100), (60, 100), (60, 120), (0, 120),
    ]


@pytest.fixture
def uneven_e() -> list:
    """Return an E whose middle arm is shorter than the outer two."""
    return [
        (0, 0), (60, 0), (60, 20), (20, 20), (20, 40), (40, 40),
        (40, 60), (20, 60), (20, 80), (60, 80), (60, 100), (0, 100),
    ]
