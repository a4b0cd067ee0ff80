"""
Classification of exceptions raised by user script code.

Every call into user code is turned into one of three outcomes:

- ``Ok(value)``: the call returned.
- ``RecoverableError``: the call raised one of the configured recoverable
  exception kinds, and the caller allows recovery.
- ``FatalError``: anything else.

Fatal outcomes travel back to the bridge as plain values and end up in
``abort_process``, the only place the process is terminated.
"""

from __future__ import annotations

import logging
import sys
import traceback
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional, Union

logger = logging.getLogger(__name__)

EXIT_FATAL = 1


@dataclass(frozen=True)
class Ok:
    value: Any


@dataclass(frozen=True)
class RecoverableError:
    kind: str
    exc: BaseException


@dataclass(frozen=True)
class FatalError:
    message: str
    exc: Optional[BaseException] = None


Outcome = Union[Ok, RecoverableError, FatalError]


def exception_name(exc: BaseException) -> str:
    return type(exc).__name__


class ExceptionTranslator:
    """Invokes user callables and classifies what they raise."""

    def __init__(self, recoverable: Iterable[str] = ("NoSuchProcess",)):
        self.recoverable = frozenset(recoverable)

    def is_recoverable(self, exc: BaseException) -> bool:
        # matched by class name, e.g. psutil.NoSuchProcess
        return any(cls.__name__ in self.recoverable for cls in type(exc).__mro__)

    def classify(self, exc: BaseException, allow_recoverable: bool = False) -> Outcome:
        if allow_recoverable and self.is_recoverable(exc):
            return RecoverableError(exception_name(exc), exc)
        return FatalError(f"Python exception ({exception_name(exc)}): {exc}", exc)

    def invoke(self, func: Callable[..., Any], *args: Any, allow_recoverable: bool = False) -> Outcome:
        try:
            return Ok(func(*args))
        # sys.exit() in user code is a failure of that code, not a way out
        except (Exception, SystemExit) as e:
            return self.classify(e, allow_recoverable=allow_recoverable)


def require_value(outcome: Outcome, what: str) -> Outcome:
    """Treat a call that returned None like a failed call."""
    if isinstance(outcome, Ok) and outcome.value is None:
        return FatalError(f"{what} returned None")
    return outcome


def print_exception(exc: Optional[BaseException]) -> None:
    if exc is not None:
        traceback.print_exception(type(exc), exc, exc.__traceback__, file=sys.stderr)


def abort_process(runtime, fatal: FatalError) -> None:
    """Report ``fatal``, tear the runtime down and exit with status 1."""
    logger.critical(fatal.message)
    print(fatal.message, file=sys.stderr)
    print_exception(fatal.exc)
    try:
        runtime.finalize()
    finally:
        sys.exit(EXIT_FATAL)
