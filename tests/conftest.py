import random

import matplotlib
import pytest

matplotlib.use("Agg")


class FixedRandom:
    """Stand-in rng: random() always returns the same value.

    0.5 maps every angular perturbation to zero, so branches grow straight.
    """

    def __init__(self, value: float = 0.5):
        self.value = value

    def random(self) -> float:
        return self.value


@pytest.fixture
def seeded_rng():
    return random.Random(1234)


@pytest.fixture
def straight_rng():
    return FixedRandom(0.5)
