import numpy as np
import pytest

from arithmetic import Rational
from interval import RationalInterval


@pytest.fixture(scope="session")
def third() -> Rational:
    """Provide session-level 1/3."""
    return Rational(1, 3)


@pytest.fixture(scope="session")
def seventh() -> Rational:
    """Provide session-level 1/7 (period 6)."""
    return Rational(1, 7)


@pytest.fixture(scope="session")
def half_to_three_quarters() -> RationalInterval:
    return RationalInterval(Rational(1, 2), Rational(3, 4))


@pytest.fixture(scope="session")
def two_thirds_to_four_thirds() -> RationalInterval:
    return RationalInterval(Rational(2, 3), Rational(4, 3))


@pytest.fixture
def rng() -> np.random.Generator:
    """Seeded generator so sampling tests are repeatable."""
    return np.random.default_rng(1234)
