import matplotlib
matplotlib.use("Agg")

import pytest

from tfcycle.cycle import calculate_cycle
from tfcycle.engine_inputs import DEFAULT_INPUTS


@pytest.fixture
def cruise():
    """Reference cruise point: 10.7 km, M 0.83, BPR 9, OPR 42, Tt4 1650 K."""
    return DEFAULT_INPUTS


@pytest.fixture
def cruise_result(cruise):
    return calculate_cycle(cruise)
