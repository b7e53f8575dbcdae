from .arena import Handle, NodeArena
from .config import HeapConfig
from .errors import (
    HeapCorruptionError,
    HeapError,
    InstrumentationError,
    InvalidHandleError,
    InvalidOperationError,
)
from .fibonacci_heap import FibonacciHeap, degree_table_size
from .instrumentation import Instrumentation, NullInstrumentation, Timer, TimerHook
from .graphs import dijkstra, prim_mst_edges

__all__ = [
    'FibonacciHeap', 'HeapConfig', 'Handle', 'NodeArena', 'degree_table_size',
    'HeapError', 'InvalidHandleError', 'InvalidOperationError', 'HeapCorruptionError',
    'InstrumentationError', 'Instrumentation', 'NullInstrumentation', 'Timer', 'TimerHook',
    'dijkstra', 'prim_mst_edges',
]
