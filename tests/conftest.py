"""
Pytest configuration for gadget tests.
"""

import random
import sys
from pathlib import Path

import pytest

# Add the project root to the path so absolute imports work
# (tests/ is inside the project root, so parent is the root)
project_dir = Path(__file__).parent.parent
if str(project_dir) not in sys.path:
    sys.path.insert(0, str(project_dir))

from constraints import TestConstraintSystem  # noqa: E402
from primitives.field import BLS12_381_SCALAR, GOLDILOCKS  # noqa: E402

# Fixed seed so random witnesses are reproducible
SEED = 0x5962BE3D763D318D


@pytest.fixture
def rng() -> random.Random:
    return random.Random(SEED)


@pytest.fixture
def cs() -> TestConstraintSystem:
    """Empty BLS12-381 scalar field test constraint system."""
    return TestConstraintSystem(BLS12_381_SCALAR)


@pytest.fixture
def small_cs() -> TestConstraintSystem:
    """Empty Goldilocks test constraint system, for exhaustive checks."""
    return TestConstraintSystem(GOLDILOCKS)
