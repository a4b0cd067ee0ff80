"""
Per-result context handed to the host between validation stages.

A context owns the list of output file paths of one result. It is created
by ``init_result``, passed back unchanged by the host to ``compare_results``
and released exactly once by ``cleanup_result``.
"""

from __future__ import annotations

import itertools
import logging
from typing import Dict, Iterable, List

from .errors import ContextReleasedError

logger = logging.getLogger(__name__)


class ResultContext:
    """Owned list of output file paths for a single in-flight result."""

    __slots__ = ("handle", "result_name", "_paths", "_released")

    def __init__(self, handle: int, result_name: str, paths: Iterable[str]):
        self.handle = handle
        self.result_name = result_name
        self._paths: List[str] = [str(p) for p in paths]
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    @property
    def paths(self) -> List[str]:
        if self._released:
            raise ContextReleasedError(
                f"context {self.handle} for {self.result_name} used after cleanup"
            )
        return self._paths

    def _release(self) -> None:
        if self._released:
            raise ContextReleasedError(
                f"context {self.handle} for {self.result_name} released twice"
            )
        self._released = True
        self._paths = []

    def __repr__(self) -> str:
        state = "released" if self._released else f"{len(self._paths)} paths"
        return f"ResultContext(handle={self.handle}, result={self.result_name!r}, {state})"


class ContextArena:
    """Allocates and releases result contexts and keeps count of both.

    Live contexts are keyed by handle; only the context handed back to
    ``free`` is ever released.
    """

    def __init__(self):
        self._ids = itertools.count(1)
        self._live: Dict[int, ResultContext] = {}
        self.allocations = 0
        self.deallocations = 0

    @property
    def live(self) -> int:
        return len(self._live)

    def is_live(self, ctx: ResultContext) -> bool:
        return self._live.get(ctx.handle) is ctx

    def allocate(self, result_name: str, paths: Iterable[str]) -> ResultContext:
        ctx = ResultContext(next(self._ids), result_name, paths)
        self._live[ctx.handle] = ctx
        self.allocations += 1
        logger.debug(f"Allocated context {ctx.handle} for {result_name}")
        return ctx

    def free(self, ctx: ResultContext) -> None:
        ctx._release()
        self._live.pop(ctx.handle, None)
        self.deallocations += 1
