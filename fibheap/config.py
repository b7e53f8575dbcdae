from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class HeapConfig(BaseModel):
    """Tuning knobs for FibonacciHeap.

    eager_threshold: when set, an insert that leaves more than this many roots
    runs a full consolidation straight away. This bounds the root list at the
    cost of the pure O(1) amortized insert. None disables it.
    """
    model_config = ConfigDict(frozen=True)

    eager_threshold: Optional[int] = Field(default=None, gt=0)
