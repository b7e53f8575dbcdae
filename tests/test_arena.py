"""
NodeArena: handle issue, generation checks, subtree release.
"""
import pytest

from fibheap import InvalidHandleError, NodeArena


def test_allocate_and_resolve():
    arena = NodeArena()
    node = arena.allocate("a")
    assert arena.resolve(node.handle) is node
    assert node.degree == 0
    assert node.is_root
    assert len(arena) == 1


def test_free_bumps_generation():
    arena = NodeArena()
    old = arena.allocate(1).handle
    arena.free(old)
    assert not arena.is_live(old)

    new = arena.allocate(2).handle
    assert new.index == old.index
    assert new.generation == old.generation + 1
    with pytest.raises(InvalidHandleError):
        arena.resolve(old)


def test_double_free_raises():
    arena = NodeArena()
    h = arena.allocate(1).handle
    arena.free(h)
    with pytest.raises(InvalidHandleError):
        arena.free(h)
    assert len(arena) == 0


def test_rejects_non_handles_and_foreign_handles():
    a, b = NodeArena(), NodeArena()
    h = a.allocate(1).handle
    b.allocate(1)
    assert a.arena_id != b.arena_id
    assert not b.is_live(h)
    assert not a.is_live("not a handle")


def test_release_subtree():
    """Releasing a root frees every descendant and nothing else."""
    arena = NodeArena()
    root = arena.allocate(0)
    bystander = arena.allocate(99)
    nodes = [root]
    for v in range(1, 7):
        child = arena.allocate(v)
        parent = nodes[(v - 1) // 2]
        child.parent = parent.handle
        parent.children[child.handle] = child
        nodes.append(child)

    assert arena.release_subtree(root.handle) == 7
    assert len(arena) == 1
    assert arena.is_live(bystander.handle)
    assert not any(arena.is_live(n.handle) for n in nodes)


def test_release_deep_chain_does_not_recurse():
    arena = NodeArena()
    head = node = arena.allocate(0)
    for v in range(1, 20_000):
        child = arena.allocate(v)
        child.parent = node.handle
        node.children[child.handle] = child
        node = child
    assert arena.release_subtree(head.handle) == 20_000
    assert len(arena) == 0


def test_reset():
    arena = NodeArena()
    handles = [arena.allocate(v).handle for v in range(5)]
    arena.free(handles[2])
    arena.reset()
    assert len(arena) == 0
    assert not any(arena.is_live(h) for h in handles)
    assert arena.allocate(1).handle not in handles
