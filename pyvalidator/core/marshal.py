"""
Conversion of result records into objects user scripts can read.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from .models import ResultRecord

RESULT_SYMBOL = "a"


class ScriptResult:
    """Read-only view of a result as seen by user scripts."""

    __slots__ = ("_name", "_appid", "_paths", "_id", "_workunitid")

    def __init__(self, name: str, appid: int, paths: Iterable[str],
                 id: Optional[int] = None, workunitid: Optional[int] = None):
        self._name = name
        self._appid = appid
        self._paths = list(paths)
        self._id = id
        self._workunitid = workunitid

    @property
    def name(self) -> str:
        return self._name

    @property
    def appid(self) -> int:
        return self._appid

    @property
    def paths(self) -> List[str]:
        return self._paths

    @property
    def id(self) -> Optional[int]:
        return self._id

    @property
    def workunitid(self) -> Optional[int]:
        return self._workunitid

    def __repr__(self) -> str:
        return f"ScriptResult(name={self._name!r}, appid={self._appid}, paths={self._paths!r})"


def build_proxy(result: ResultRecord, paths: Iterable[str]) -> ScriptResult:
    return ScriptResult(result.name, result.appid, paths, id=result.id, workunitid=result.workunitid)


def marshal(runtime, result: ResultRecord, paths: Iterable[str], symbol: str = RESULT_SYMBOL) -> ScriptResult:
    """Build the proxy for ``result`` and bind it as ``symbol`` in the script namespace.

    A previous binding under the same symbol is replaced; there is only one
    current result per callback.
    """
    proxy = build_proxy(result, paths)
    runtime.namespace[symbol] = proxy
    return proxy
