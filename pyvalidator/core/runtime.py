"""
Process-wide scripting runtime used by the validator bridge.

The runtime is a dedicated module namespace into which the user scripts are
executed, plus the extra module search path entries the auxiliary hook
module is imported from. It is brought up lazily by the first callback and
torn down only before a fatal abort.
"""

from __future__ import annotations

import importlib
import logging
import sys
import types
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from .errors import ScriptLoadError

logger = logging.getLogger(__name__)

NAMESPACE_MODULE = "__pyvalidator_main__"


class ScriptRuntime:
    """Explicit handle on the user script namespace.

    Not reentrant and not thread safe: the host drives it from a single
    thread.
    """

    def __init__(
        self,
        scripts: Sequence[Union[str, Path]] = (),
        search_path: Sequence[Union[str, Path]] = (),
        aux_module: Optional[str] = "boinctools",
    ):
        self.scripts = [Path(s) for s in scripts]
        self.search_path = [str(p) for p in search_path]
        self.aux_module = aux_module
        self._module: Optional[types.ModuleType] = None
        self._added_paths: List[str] = []

    @classmethod
    def from_config(cls, config) -> "ScriptRuntime":
        return cls(scripts=config.scripts, search_path=config.search_path, aux_module=config.aux_module)

    @property
    def initialized(self) -> bool:
        return self._module is not None

    @property
    def namespace(self) -> Dict[str, Any]:
        """Top-level namespace of the user scripts."""
        if self._module is None:
            raise RuntimeError("script runtime is not initialized")
        return self._module.__dict__

    def initialize(self) -> None:
        """Bring the runtime up; does nothing if it is already up."""
        if self._module is not None:
            return

        for entry in reversed(self.search_path):
            if entry not in sys.path:
                sys.path.insert(0, entry)
                self._added_paths.append(entry)

        module = types.ModuleType(NAMESPACE_MODULE)
        try:
            for script in self.scripts:
                self._run_script(module, script)
        except ScriptLoadError:
            self._remove_paths()
            raise

        self._module = module
        logger.info(f"Script runtime initialized ({len(self.scripts)} script(s))")

    def finalize(self) -> None:
        """Tear the runtime down so the next initialize() starts fresh."""
        if self._module is None and not self._added_paths:
            return
        self._module = None
        self._remove_paths()
        logger.info("Script runtime finalized")

    def import_aux(self) -> Optional[types.ModuleType]:
        """Import the auxiliary hook module, or return None if there is none.

        Errors raised while importing an existing module propagate.
        """
        if not self.aux_module:
            return None
        try:
            return importlib.import_module(self.aux_module)
        except ModuleNotFoundError as e:
            if e.name and (e.name == self.aux_module or self.aux_module.startswith(e.name + ".")):
                logger.debug(f"Auxiliary module {self.aux_module} not found")
                return None
            raise

    def _run_script(self, module: types.ModuleType, script: Path) -> None:
        try:
            source = script.read_text()
        except OSError as e:
            raise ScriptLoadError(f"Cannot read user script {script}: {e}") from e

        logger.debug(f"Loading user script {script}")
        module.__dict__["__file__"] = str(script)
        try:
            exec(compile(source, str(script), "exec"), module.__dict__)
        except (Exception, SystemExit) as e:
            raise ScriptLoadError(f"User script {script} failed: {type(e).__name__}: {e}") from e

    def _remove_paths(self) -> None:
        for entry in self._added_paths:
            try:
                sys.path.remove(entry)
            except ValueError:
                pass
        self._added_paths = []
