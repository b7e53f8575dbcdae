"""
Graph algorithms driven by FibonacciHeap.decrease_key.

Both functions take anything exposing a networkx-style ``adj`` mapping
(``graph.adj[u][v]`` is the edge attribute dict). Heap entries are
``(priority, index, vertex)`` tuples; the unique index keeps comparisons from
ever reaching the vertex, so vertices only need to be hashable.
"""
import math
from typing import Any, Dict, Hashable, Iterator, Tuple

from .fibonacci_heap import FibonacciHeap


def _edge_weight(attrs, weight: str) -> float:
    w = attrs.get(weight, 1)
    if w < 0:
        raise ValueError(f"negative edge weight {w!r}")
    return w


def dijkstra(graph, source: Hashable, weight: str = "weight") -> Tuple[Dict[Any, float], Dict[Any, Any]]:
    """Single-source shortest path lengths.

    Returns (dist, pred): dist maps each reachable vertex to its distance from
    source, pred maps each reachable vertex except source to its predecessor.
    """
    adj = graph.adj
    if source not in adj:
        raise KeyError(f"source {source!r} is not in the graph")

    heap = FibonacciHeap()
    order = {v: i for i, v in enumerate(adj)}
    handles = {source: heap.insert((0, order[source], source))}
    dist: Dict[Any, float] = {}
    pred: Dict[Any, Any] = {}

    while heap:
        d, _, u = heap.extract_min()
        dist[u] = d
        for v, attrs in adj[u].items():
            if v in dist:
                continue
            candidate = d + _edge_weight(attrs, weight)
            handle = handles.get(v)
            if handle is None:
                handles[v] = heap.insert((candidate, order[v], v))
                pred[v] = u
            elif candidate < heap.get(handle)[0]:
                heap.decrease_key(handle, (candidate, order[v], v))
                pred[v] = u

    return dist, pred


def prim_mst_edges(graph, weight: str = "weight") -> Iterator[Tuple[Any, Any, float]]:
    """Yield (u, v, w) edges of a minimum spanning forest of an undirected graph."""
    adj = graph.adj
    order = {v: i for i, v in enumerate(adj)}
    done = set()

    for start in adj:
        if start in done:
            continue

        heap = FibonacciHeap()
        handles = {start: heap.insert((0, order[start], start))}
        via: Dict[Any, Any] = {}

        while heap:
            w, _, u = heap.extract_min()
            done.add(u)
            if u in via:
                yield via[u], u, w
            for v, attrs in adj[u].items():
                if v in done:
                    continue
                cost = attrs.get(weight, 1)
                handle = handles.get(v)
                if handle is None:
                    handles[v] = heap.insert((cost, order[v], v))
                    via[v] = u
                elif cost < heap.get(handle)[0]:
                    heap.decrease_key(handle, (cost, order[v], v))
                    via[v] = u


def total_weight(edges) -> float:
    return math.fsum(w for _, _, w in edges)
