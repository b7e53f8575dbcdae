import pytest
from pydantic import ValidationError

from fibheap import FibonacciHeap, HeapConfig


def test_defaults_disable_eager_consolidation():
    assert HeapConfig().eager_threshold is None
    assert FibonacciHeap().config == HeapConfig()


@pytest.mark.parametrize("bad", [0, -3, "lots"])
def test_rejects_invalid_threshold(bad):
    with pytest.raises(ValidationError):
        HeapConfig(eager_threshold=bad)


def test_dict_config_is_validated():
    with pytest.raises(ValidationError):
        FibonacciHeap({"eager_threshold": 0})


def test_config_is_frozen():
    config = HeapConfig(eager_threshold=10)
    with pytest.raises(ValidationError):
        config.eager_threshold = 20
