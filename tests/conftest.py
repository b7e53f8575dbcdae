import random
import pytest

from fibheap import FibonacciHeap, Timer


@pytest.fixture
def heap():
    """A fresh heap with default config and no instrumentation."""
    return FibonacciHeap()


@pytest.fixture
def timer():
    return Timer("test")


@pytest.fixture
def rng():
    """Seeded RNG so randomized tests are reproducible."""
    return random.Random(1234)
