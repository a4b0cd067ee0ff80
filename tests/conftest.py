"""Shared fixtures: user scripts written to tmp_path and an in-memory hook module."""

import logging
import sys
import textwrap
import types

import pytest

from pyvalidator.core.bridge import ValidatorBridge
from pyvalidator.core.models import ResultRecord
from pyvalidator.core.runtime import ScriptRuntime

AUX_MODULE = "pyvalidator_test_hooks"


@pytest.fixture
def write_script(tmp_path):
    def _write(source: str, name: str = "validators.py"):
        path = tmp_path / name
        path.write_text(textwrap.dedent(source))
        return path
    return _write


@pytest.fixture
def aux(monkeypatch):
    """Auxiliary hook module; tests attach update_process/continue_children to it."""
    mod = types.ModuleType(AUX_MODULE)
    monkeypatch.setitem(sys.modules, AUX_MODULE, mod)
    return mod


@pytest.fixture
def make_bridge(write_script):
    def _make(source: str = "", **kwargs):
        script = write_script(source)
        runtime = ScriptRuntime(scripts=[script], aux_module=AUX_MODULE)
        return ValidatorBridge(runtime, **kwargs)
    return _make


def make_result(name="wu_123", appid=42, files=("/upload/1a/wu_123_0",), **kwargs):
    return ResultRecord(name=name, appid=appid, output_files=list(files), **kwargs)


@pytest.fixture(name="make_result")
def make_result_fixture():
    return make_result


@pytest.fixture(autouse=True)
def restore_root_logging():
    """setup_logging() replaces the root handlers; put the previous ones back."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for h in list(root.handlers):
        if h not in handlers:
            root.removeHandler(h)
            h.close()
    for h in handlers:
        if h not in root.handlers:
            root.addHandler(h)
    root.setLevel(level)
