import time
from enum import Enum
from typing import Dict, Optional, Protocol, Tuple

from .errors import InstrumentationError


class TimerHook(str, Enum):
    CHILD_PROMOTION = "child-promotion"
    TREE_MERGE_PASS = "tree-merge-pass"
    INNER_MERGE_LOOP = "inner-merge-loop"
    MIN_UPDATE = "min-update"
    ROOT_BUCKET_INSERT_FAST = "root-bucket-insert-fast"
    ROOT_BUCKET_INSERT_SLOW = "root-bucket-insert-slow"


class Instrumentation(Protocol):
    def begin(self, hook: TimerHook) -> None: ...

    def end(self, hook: TimerHook) -> None: ...


class NullInstrumentation:
    def begin(self, hook: TimerHook) -> None:
        pass

    def end(self, hook: TimerHook) -> None:
        pass


class Timer:
    """Accumulates wall-clock spans (nanoseconds) per hook.

    An end() for a hook whose span is not running is ignored; an end() for a
    hook that was never begun is a usage error.
    """

    def __init__(self, name: str = "fibheap"):
        self.name = name
        self.times: Dict[TimerHook, Tuple[int, int]] = {}
        self._running: Dict[TimerHook, Optional[int]] = {}

    def begin(self, hook: TimerHook) -> None:
        self._running[hook] = time.perf_counter_ns()

    def end(self, hook: TimerHook) -> None:
        stop = time.perf_counter_ns()
        if hook not in self._running:
            raise InstrumentationError(f"end() for hook {hook} that was never begun")

        start = self._running[hook]
        if start is None:
            return

        total, samples = self.times.get(hook, (0, 0))
        self.times[hook] = (total + stop - start, samples + 1)
        self._running[hook] = None

    def averages(self) -> Dict[TimerHook, float]:
        return {hook: total / samples for hook, (total, samples) in self.times.items() if samples}

    def reset(self):
        self.times.clear()
        self._running.clear()

    def report(self) -> str:
        lines = [f"Name: {self.name}"]
        for hook, avg in sorted(self.averages().items(), key=lambda kv: kv[0].value):
            samples = self.times[hook][1]
            lines.append(f"  {hook.value:<26} avg {avg:>10.1f} ns over {samples} samples")
        return "\n".join(lines)

    def __repr__(self):
        return f"Timer(name={self.name!r}, hooks={len(self.times)})"
