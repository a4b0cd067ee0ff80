"""
Validator callbacks that hand results over to user Python code.

The host validator calls, for every result, ``init_result`` once, then
``compare_results`` against other results of the same work unit any number
of times, and finally ``cleanup_result``:

    Created -> Initialized -> (Compared)* -> Cleaned

``init_result`` returns a ResultContext which the host stores and passes
back unchanged; ``cleanup_result`` releases it.

Failure policy:
- ``update_process`` (init) may raise one of the recoverable exception kinds
  (NoSuchProcess by default); this is logged and ignored. Anything else it
  raises aborts the process.
- A missing ``validators``/``cleaners`` entry, an exception from it, or a
  None return aborts the process. An unregistered application is a
  deployment error.
- ``continue_children`` (cleanup) is best effort; failures only change the
  return status.
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from .configuration import BridgeConfiguration, load_from_env
from .context import ContextArena, ResultContext
from .errors import OutputFileError, ScriptLoadError
from .files import OutputFileResolver, resolver_for
from .marshal import RESULT_SYMBOL, ScriptResult, build_proxy, marshal
from .models import ResultRecord
from .registry import (
    CLEANERS,
    CONTINUE_CHILDREN,
    UPDATE_PROCESS,
    VALIDATORS,
    Found,
    resolve,
    resolve_hook,
)
from .runtime import ScriptRuntime
from .translator import (
    ExceptionTranslator,
    FatalError,
    Ok,
    Outcome,
    RecoverableError,
    abort_process,
    print_exception,
    require_value,
)

logger = logging.getLogger(__name__)


class ValidatorBridge:
    """Implements the three validator callbacks on top of a ScriptRuntime."""

    def __init__(
        self,
        runtime: ScriptRuntime,
        resolve_files: Optional[OutputFileResolver] = None,
        translator: Optional[ExceptionTranslator] = None,
        arena: Optional[ContextArena] = None,
        result_symbol: str = RESULT_SYMBOL,
    ):
        self.runtime = runtime
        self.resolve_files = resolve_files or resolver_for(None)
        self.translator = translator or ExceptionTranslator()
        self.arena = arena or ContextArena()
        self.result_symbol = result_symbol

    @classmethod
    def from_config(cls, config: BridgeConfiguration) -> "ValidatorBridge":
        return cls(
            runtime=ScriptRuntime.from_config(config),
            resolve_files=resolver_for(config.upload_dir, config.fanout),
            translator=ExceptionTranslator(config.recoverable_exceptions),
            result_symbol=config.result_symbol,
        )

    # ----- callbacks -----

    def init_result(self, result: ResultRecord) -> Tuple[int, ResultContext]:
        """Create the context of ``result`` and run the update_process hook."""
        self._ensure_runtime()

        try:
            paths = self.resolve_files(result)
        except OutputFileError as e:
            logger.error(f"Could not resolve output files of {result.name}: {e}")
            paths = []
        ctx = self.arena.allocate(result.name, paths)
        proxy = marshal(self.runtime, result, ctx.paths, self.result_symbol)
        logger.info(f"{proxy.name} running app number {proxy.appid}")

        outcome = self._call_hook(UPDATE_PROCESS, proxy, allow_recoverable=True)
        if isinstance(outcome, FatalError):
            self._abort(outcome)
        elif isinstance(outcome, RecoverableError):
            logger.warning(f"{UPDATE_PROCESS} for {result.name} raised {outcome.kind}; ignored")
        elif isinstance(outcome, Ok) and outcome.value is not None:
            logger.info(f"Result: {outcome.value}")

        return 0, ctx

    def compare_results(
        self,
        r1: ResultRecord,
        ctx1: ResultContext,
        r2: ResultRecord,
        ctx2: ResultContext,
    ) -> Tuple[int, bool]:
        """Ask the application's validator whether ``r1`` and ``r2`` match."""
        self._ensure_runtime()

        proxy1 = marshal(self.runtime, r1, ctx1.paths, self.result_symbol)
        proxy2 = build_proxy(r2, ctx2.paths)

        outcome = self._call_registered(
            VALIDATORS, r1, proxy1, list(ctx1.paths), proxy2, list(ctx2.paths)
        )
        if not isinstance(outcome, Ok):
            self._abort(FatalError(
                f"There was a python error when validating {r1.name}: {outcome.message}",
                outcome.exc,
            ))
        match = bool(outcome.value)
        logger.debug(f"{r1.name} vs {r2.name}: match={match}")
        return 0, match

    def cleanup_result(self, result: ResultRecord, ctx: ResultContext) -> int:
        """Run the application's cleaner, then continue_children; releases ``ctx``."""
        self._ensure_runtime()

        proxy = marshal(self.runtime, result, ctx.paths, self.result_symbol)
        outcome = self._call_registered(CLEANERS, result, proxy, list(ctx.paths))
        if not isinstance(outcome, Ok):
            self._abort(FatalError(
                f"There was a python error when cleaning {result.name}: {outcome.message}",
                outcome.exc,
            ))

        status = 0
        try:
            hook = self._call_hook(CONTINUE_CHILDREN, proxy)
            if isinstance(hook, (FatalError, RecoverableError)):
                logger.error(f"{self.runtime.aux_module}.{CONTINUE_CHILDREN} failed for {result.name}")
                print_exception(hook.exc)
                status = 1
        finally:
            self.arena.free(ctx)
        return status

    # ----- helpers -----

    def _ensure_runtime(self) -> None:
        try:
            self.runtime.initialize()
        except ScriptLoadError as e:
            self._abort(FatalError(str(e), e))

    def _call_registered(self, registry_name: str, result: ResultRecord, *args) -> Outcome:
        lookup = self.translator.invoke(resolve, self.runtime.namespace, registry_name, result.workload_id)
        if not isinstance(lookup, Ok):
            return lookup
        found = lookup.value
        if not isinstance(found, Found):
            return FatalError(found.reason)
        what = f"{registry_name}['{result.workload_id}']"
        return require_value(self.translator.invoke(found.func, *args), what)

    def _call_hook(self, hook_name: str, proxy: ScriptResult, allow_recoverable: bool = False) -> Optional[Outcome]:
        """Run an optional auxiliary hook; None means there was nothing to run."""
        try:
            module = self.runtime.import_aux()
        except (Exception, SystemExit) as e:
            return self.translator.classify(e, allow_recoverable=allow_recoverable)

        lookup = self.translator.invoke(resolve_hook, module, hook_name, allow_recoverable=allow_recoverable)
        if not isinstance(lookup, Ok):
            return lookup
        found = lookup.value
        if not isinstance(found, Found):
            logger.debug(f"Skipping {hook_name}: {found.reason}")
            return None
        logger.debug(f"Calling {hook_name}")
        return self.translator.invoke(found.func, proxy, allow_recoverable=allow_recoverable)

    def _abort(self, fatal: FatalError) -> None:
        abort_process(self.runtime, fatal)


# ----- process-wide bridge used by the host entry points -----

_bridge: Optional[ValidatorBridge] = None


def install_bridge(bridge: Optional[ValidatorBridge]) -> None:
    global _bridge
    _bridge = bridge


def get_bridge() -> ValidatorBridge:
    """Return the installed bridge, building one from $PYVALIDATOR_CONFIG on first use."""
    global _bridge
    if _bridge is None:
        _bridge = ValidatorBridge.from_config(load_from_env())
    return _bridge


def init_result(result: ResultRecord) -> Tuple[int, ResultContext]:
    return get_bridge().init_result(result)


def compare_results(r1: ResultRecord, ctx1: ResultContext, r2: ResultRecord, ctx2: ResultContext) -> Tuple[int, bool]:
    return get_bridge().compare_results(r1, ctx1, r2, ctx2)


def cleanup_result(result: ResultRecord, ctx: ResultContext) -> int:
    return get_bridge().cleanup_result(result, ctx)
