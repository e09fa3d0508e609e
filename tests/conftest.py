import pytest


class FixedRng:
    """Stands in for numpy's Generator: always 'draws' the same velocity."""

    def __init__(self, value):
        self.value = value
        self.calls = []

    def uniform(self, low, high):
        self.calls.append((low, high))
        return self.value


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def fixed_rng():
    return FixedRng(1.0)
