"""
Lookup of user callables in script-resident registries.

Registries are plain dicts in the user script namespace mapping an
application id (as a string) to a callable:

    validators = {"42": compare_energy}
    cleaners = {"42": remove_outputs}

Lookups are never cached, so edits to the registries take effect on the
next callback.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import ModuleType
from typing import Any, Callable, Dict, Optional, Union

VALIDATORS = "validators"
CLEANERS = "cleaners"

UPDATE_PROCESS = "update_process"
CONTINUE_CHILDREN = "continue_children"


@dataclass(frozen=True)
class Found:
    func: Callable[..., Any]


@dataclass(frozen=True)
class NotFound:
    reason: str


Resolution = Union[Found, NotFound]


def resolve(namespace: Dict[str, Any], registry_name: str, workload_id: Union[int, str]) -> Resolution:
    """Find the callable registered for ``workload_id`` in ``registry_name``."""
    key = str(workload_id)
    registry = namespace.get(registry_name)
    if registry is None:
        return NotFound(f"no '{registry_name}' registry defined")
    if not isinstance(registry, Mapping):
        return NotFound(f"'{registry_name}' is a {type(registry).__name__}, not a dict")
    if key not in registry:
        return NotFound(f"'{registry_name}' has no entry for '{key}'")
    func = registry[key]
    if not callable(func):
        return NotFound(f"{registry_name}['{key}'] is not callable")
    return Found(func)


def resolve_hook(module: Optional[ModuleType], hook_name: str) -> Resolution:
    """Find an optional hook function in the auxiliary module."""
    if module is None:
        return NotFound("no auxiliary module")
    func = getattr(module, hook_name, None)
    if func is None:
        return NotFound(f"{module.__name__} has no '{hook_name}'")
    if not callable(func):
        return NotFound(f"{module.__name__}.{hook_name} is not callable")
    return Found(func)
