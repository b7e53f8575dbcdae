class HeapError(Exception):
    """Base class for everything the heap raises."""


class InvalidHandleError(HeapError, LookupError):
    """Handle does not resolve to a live node (freed, reused slot, or another heap's)."""


class InvalidOperationError(HeapError, ValueError):
    """decrease_key was asked to increase a value."""


class HeapCorruptionError(HeapError, RuntimeError):
    """Internal bookkeeping is inconsistent. Not recoverable."""


class InstrumentationError(HeapError):
    pass
