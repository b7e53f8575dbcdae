from itertools import count
from typing import Any, Dict, List, Optional
from dataclasses import dataclass, field

from .errors import InvalidHandleError


_arena_ids = count()


@dataclass(frozen=True)
class Handle:
    """Opaque reference to a node, returned by insert."""
    arena_id: int
    index: int
    generation: int


@dataclass(eq=False)
class Node:
    handle: Handle
    value: Any
    parent: Optional[Handle] = None
    # owned children, insertion ordered
    children: Dict[Handle, "Node"] = field(default_factory=dict)
    marked: bool = False

    @property
    def degree(self) -> int:
        return len(self.children)

    @property
    def is_root(self) -> bool:
        return self.parent is None


class NodeArena:
    """Owns every node of one heap.

    Slots are reused after a node is freed, but each free bumps the slot's
    generation, so a handle minted before the free no longer resolves.
    """

    def __init__(self):
        self.arena_id = next(_arena_ids)
        self._slots: List[Optional[Node]] = []
        self._generations: List[int] = []
        self._free: List[int] = []
        self._live = 0

    def __len__(self):
        return self._live

    def allocate(self, value: Any) -> Node:
        if self._free:
            index = self._free.pop()
        else:
            index = len(self._slots)
            self._slots.append(None)
            self._generations.append(0)

        handle = Handle(self.arena_id, index, self._generations[index])
        node = Node(handle=handle, value=value)
        self._slots[index] = node
        self._live += 1
        return node

    def is_live(self, handle: Handle) -> bool:
        if not isinstance(handle, Handle) or handle.arena_id != self.arena_id:
            return False
        if handle.index < 0 or handle.index >= len(self._slots):
            return False
        return (self._generations[handle.index] == handle.generation
                and self._slots[handle.index] is not None)

    def resolve(self, handle: Handle) -> Node:
        if not self.is_live(handle):
            raise InvalidHandleError(f"handle {handle!r} does not refer to a live node")
        return self._slots[handle.index]

    def free(self, handle: Handle) -> Node:
        node = self.resolve(handle)
        self._slots[handle.index] = None
        self._generations[handle.index] += 1
        self._free.append(handle.index)
        self._live -= 1
        return node

    def release_subtree(self, handle: Handle) -> int:
        """Free the node behind handle and everything below it.

        Walks with an explicit stack and never compares values.
        """
        released = 0
        stack = [handle]
        while stack:
            node = self.free(stack.pop())
            stack.extend(node.children)
            node.children.clear()
            node.parent = None
            released += 1
        return released

    def reset(self):
        for index, node in enumerate(self._slots):
            if node is not None:
                self._slots[index] = None
                self._generations[index] += 1
                self._free.append(index)
        self._live = 0
