import math
import logging
from typing import Any, Dict, List, Optional, Union

from .arena import Handle, Node, NodeArena
from .config import HeapConfig
from .errors import HeapCorruptionError, InvalidHandleError, InvalidOperationError
from .instrumentation import Instrumentation, NullInstrumentation, TimerHook


logger = logging.getLogger(__name__)

PHI = (1 + math.sqrt(5)) / 2


def degree_table_size(node_count: int) -> int:
    """Buckets needed to consolidate a heap holding node_count nodes.

    A tree of degree k holds at least F(k+2) >= PHI**k nodes, so no degree can
    exceed log_phi(n).
    """
    if node_count < 2:
        return 2
    return math.ceil(math.log(node_count, PHI)) + 2


class FibonacciHeap:
    """Min-ordered Fibonacci heap.

    insert() returns a Handle; keep it to decrease the value later. Values only
    need to support < and > against each other.

    Ordering rules, fixed so results are reproducible:
      - insert/cut keep the existing minimum on ties.
      - when consolidation links two trees with equal values, the tree already
        sitting in the degree bucket stays parent.
      - roots are consolidated in root-list order: surviving roots in the order
        they became roots, then the promoted children of the extracted node.
    """

    def __init__(self, config: Union[HeapConfig, Dict[str, Any], None] = None,
                 instrumentation: Optional[Instrumentation] = None):
        if config is None:
            config = HeapConfig()
        elif isinstance(config, dict):
            config = HeapConfig.model_validate(config)
        self.config = config

        self._profiling = instrumentation is not None
        self._instrumentation = instrumentation if self._profiling else NullInstrumentation()

        self._arena = NodeArena()
        self._roots: Dict[Handle, Node] = {}
        self._min: Optional[Node] = None
        self._table_size = 0

    # -----------------------------
    # Root management
    # -----------------------------
    def insert(self, value: Any) -> Handle:
        node = self._arena.allocate(value)
        self._add_root(node)

        threshold = self.config.eager_threshold
        if threshold is not None and len(self._roots) > threshold:
            logger.debug("root list at %d exceeds eager threshold %d, consolidating",
                         len(self._roots), threshold)
            self._consolidate()
        return node.handle

    def peek_min(self):
        return self._min.value if self._min is not None else None

    def _add_root(self, node: Node):
        self._roots[node.handle] = node
        if self._min is None or node.value < self._min.value:
            self._min = node

    # -----------------------------
    # Consolidation
    # -----------------------------
    def extract_min(self):
        root = self._min
        if root is None:
            return None

        del self._roots[root.handle]
        self._promote_children(root)
        self._min = None
        self._arena.free(root.handle)

        if self._roots:
            self._consolidate()
        return root.value

    def _promote_children(self, node: Node):
        if self._profiling:
            self._instrumentation.begin(TimerHook.CHILD_PROMOTION)

        for handle, child in node.children.items():
            child.parent = None
            child.marked = False
            self._roots[handle] = child
        node.children.clear()

        if self._profiling:
            self._instrumentation.end(TimerHook.CHILD_PROMOTION)

    def _consolidate(self):
        profiling = self._profiling
        instrumentation = self._instrumentation

        if profiling:
            instrumentation.begin(TimerHook.TREE_MERGE_PASS)

        size = degree_table_size(len(self._arena))
        if size > self._table_size:
            logger.debug("degree table grows from %d to %d buckets (%d nodes)",
                         self._table_size, size, len(self._arena))
            self._table_size = size
        table: List[Optional[Node]] = [None] * size

        for node in self._roots.values():
            if profiling:
                instrumentation.begin(TimerHook.INNER_MERGE_LOOP)
            self._bucket_insert(node, table)
            if profiling:
                instrumentation.end(TimerHook.INNER_MERGE_LOOP)

        if profiling:
            instrumentation.end(TimerHook.TREE_MERGE_PASS)
            instrumentation.begin(TimerHook.MIN_UPDATE)

        self._roots = {}
        self._min = None
        for node in table:
            if node is not None:
                self._add_root(node)

        if profiling:
            instrumentation.end(TimerHook.MIN_UPDATE)

    def _bucket_insert(self, node: Node, table: List[Optional[Node]]):
        """Drop a tree into the degree table, linking equal-degree trees until it fits."""
        degree = self._checked_degree(node, table)
        if table[degree] is None:
            if self._profiling:
                self._instrumentation.begin(TimerHook.ROOT_BUCKET_INSERT_FAST)
            table[degree] = node
            if self._profiling:
                self._instrumentation.end(TimerHook.ROOT_BUCKET_INSERT_FAST)
            return

        if self._profiling:
            self._instrumentation.begin(TimerHook.ROOT_BUCKET_INSERT_SLOW)

        while table[degree] is not None:
            other = table[degree]
            table[degree] = None
            if node.value < other.value:
                parent, child = node, other
            else:
                parent, child = other, node
            self._link(child, parent)
            node = parent
            degree = self._checked_degree(node, table)
        table[degree] = node

        if self._profiling:
            self._instrumentation.end(TimerHook.ROOT_BUCKET_INSERT_SLOW)

    @staticmethod
    def _checked_degree(node: Node, table: List[Optional[Node]]) -> int:
        degree = node.degree
        if degree >= len(table):
            raise HeapCorruptionError(
                f"degree {degree} does not fit a table of {len(table)} buckets")
        return degree

    @staticmethod
    def _link(child: Node, parent: Node):
        child.parent = parent.handle
        parent.children[child.handle] = child

    # -----------------------------
    # Cut engine
    # -----------------------------
    def decrease_key(self, handle: Handle, new_value: Any) -> None:
        """Lower the value behind handle.

        Raises InvalidHandleError for a stale handle and InvalidOperationError
        when new_value is greater than the current value. Neither case touches
        the heap.
        """
        node = self._arena.resolve(handle)
        if new_value > node.value:
            raise InvalidOperationError(
                f"decrease_key cannot raise a value ({node.value!r} -> {new_value!r})")

        node.value = new_value
        if node.parent is None:
            if new_value < self._min.value:
                self._min = node
            return

        parent = self._parent_of(node)
        if new_value < parent.value:
            self._cut(node, parent)
            self._cascading_cut(parent)

    def _parent_of(self, node: Node) -> Node:
        try:
            return self._arena.resolve(node.parent)
        except InvalidHandleError as e:
            raise HeapCorruptionError(f"node {node.handle!r} points at a dead parent") from e

    def _cut(self, node: Node, parent: Node):
        if parent.children.pop(node.handle, None) is None:
            raise HeapCorruptionError(
                f"node {node.handle!r} is not among its parent's children")
        node.parent = None
        node.marked = False
        self._add_root(node)

    def _cascading_cut(self, node: Node):
        while node.parent is not None:
            if not node.marked:
                node.marked = True
                return
            parent = self._parent_of(node)
            self._cut(node, parent)
            node = parent

    # -----------------------------
    # Teardown
    # -----------------------------
    def clear(self):
        if not self._roots:
            return

        released = 0
        for handle in list(self._roots):
            released += self._arena.release_subtree(handle)
        self._roots.clear()
        self._min = None
        logger.debug("cleared %d nodes", released)

        if len(self._arena):
            raise HeapCorruptionError(f"{len(self._arena)} nodes unreachable from the root list")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.clear()
        return False

    # -----------------------------
    # Read-only helpers
    # -----------------------------
    def get(self, handle: Handle):
        """Current value behind a live handle."""
        return self._arena.resolve(handle).value

    def size(self):
        return len(self._arena)

    def is_empty(self):
        return len(self._arena) == 0

    @property
    def root_count(self) -> int:
        return len(self._roots)

    def __len__(self):
        return len(self._arena)

    def __bool__(self):
        return len(self._arena) > 0

    def __contains__(self, handle):
        return self._arena.is_live(handle)

    def __repr__(self):
        return f"FibonacciHeap(size={len(self)}, roots={self.root_count}, min={self.peek_min()!r})"

    def check_invariants(self, distinct_degrees: bool = False):
        """Walk the whole forest and raise HeapCorruptionError on the first broken rule.

        distinct_degrees additionally requires every root to have its own
        degree, which only holds right after a consolidation.
        """
        if not self._roots:
            if self._min is not None or len(self._arena):
                raise HeapCorruptionError("empty root list but the heap still holds nodes")
            return

        if self._min is None or self._roots.get(self._min.handle) is not self._min:
            raise HeapCorruptionError("minimum is not a root")

        seen = 0
        degrees = set()
        for handle, root in self._roots.items():
            if root.handle != handle or root.parent is not None:
                raise HeapCorruptionError(f"root {handle!r} has a parent")
            if root.marked:
                raise HeapCorruptionError(f"root {handle!r} is marked")
            if root.value < self._min.value:
                raise HeapCorruptionError(f"root {handle!r} is smaller than the minimum")
            if distinct_degrees:
                if root.degree in degrees:
                    raise HeapCorruptionError(f"two roots share degree {root.degree}")
                degrees.add(root.degree)

            stack = [root]
            while stack:
                node = stack.pop()
                if not self._arena.is_live(node.handle) or self._arena.resolve(node.handle) is not node:
                    raise HeapCorruptionError(f"node {node.handle!r} is not owned by the arena")
                seen += 1
                for child_handle, child in node.children.items():
                    if child.handle != child_handle or child.parent != node.handle:
                        raise HeapCorruptionError(f"child {child_handle!r} has the wrong parent")
                    if child.value < node.value:
                        raise HeapCorruptionError(f"child {child_handle!r} breaks heap order")
                    stack.append(child)

        if seen != len(self._arena):
            raise HeapCorruptionError(f"{len(self._arena) - seen} live nodes are unreachable")
