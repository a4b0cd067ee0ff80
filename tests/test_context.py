import pytest

from pyvalidator.core.context import ContextArena
from pyvalidator.core.errors import ContextReleasedError


def test_allocate_and_free_counts():
    arena = ContextArena()
    ctx = arena.allocate("wu_1", ["/a", "/b"])
    assert ctx.paths == ["/a", "/b"]
    assert arena.live == 1 and arena.is_live(ctx)
    arena.free(ctx)
    assert arena.live == 0
    assert arena.allocations == 1
    assert arena.deallocations == 1
    assert ctx.released


def test_double_free_raises():
    arena = ContextArena()
    ctx = arena.allocate("wu_1", [])
    arena.free(ctx)
    with pytest.raises(ContextReleasedError):
        arena.free(ctx)
    assert arena.deallocations == 1


def test_paths_unavailable_after_release():
    arena = ContextArena()
    ctx = arena.allocate("wu_1", ["/a"])
    arena.free(ctx)
    with pytest.raises(ContextReleasedError):
        ctx.paths


def test_contexts_sharing_a_result_name_stay_independent():
    arena = ContextArena()
    first = arena.allocate("wu_1", ["/a"])
    second = arena.allocate("wu_1", ["/b"])
    assert first.handle != second.handle
    assert arena.live == 2
    assert first.paths == ["/a"] and second.paths == ["/b"]
    arena.free(first)
    assert not arena.is_live(first) and arena.is_live(second)
    assert second.paths == ["/b"]
    assert arena.deallocations == 1
