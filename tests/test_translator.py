import psutil
import pytest

from pyvalidator.core.runtime import ScriptRuntime
from pyvalidator.core.translator import (
    ExceptionTranslator,
    FatalError,
    Ok,
    RecoverableError,
    abort_process,
    require_value,
)


def _raise(exc):
    raise exc


def test_invoke_ok():
    t = ExceptionTranslator()
    assert t.invoke(lambda a, b: a + b, 1, 2) == Ok(3)


def test_no_such_process_recoverable_only_when_allowed():
    t = ExceptionTranslator()
    exc = psutil.NoSuchProcess(12345)
    out = t.invoke(_raise, exc, allow_recoverable=True)
    assert isinstance(out, RecoverableError) and out.kind == "NoSuchProcess"
    assert isinstance(t.invoke(_raise, exc), FatalError)


def test_other_exceptions_fatal():
    t = ExceptionTranslator()
    out = t.invoke(_raise, ValueError("bad"), allow_recoverable=True)
    assert isinstance(out, FatalError)
    assert "ValueError" in out.message and "bad" in out.message


def test_recoverable_matches_base_class_names():
    class NoSuchProcess(Exception):
        pass

    class ZombieLike(NoSuchProcess):
        pass

    t = ExceptionTranslator(["NoSuchProcess"])
    assert t.is_recoverable(ZombieLike())
    assert not ExceptionTranslator([]).is_recoverable(NoSuchProcess())


def test_require_value():
    assert isinstance(require_value(Ok(None), "validators['1']"), FatalError)
    assert require_value(Ok(False), "x") == Ok(False)
    fatal = FatalError("boom")
    assert require_value(fatal, "x") is fatal


def test_abort_process_finalizes_and_exits(capsys):
    rt = ScriptRuntime()
    rt.initialize()
    try:
        raise RuntimeError("inner")
    except RuntimeError as e:
        fatal = FatalError("validator blew up", e)
    with pytest.raises(SystemExit) as info:
        abort_process(rt, fatal)
    assert info.value.code == 1
    assert not rt.initialized
    err = capsys.readouterr().err
    assert "validator blew up" in err
    assert "RuntimeError: inner" in err


def test_system_exit_from_user_code_is_fatal():
    t = ExceptionTranslator()
    out = t.invoke(_raise, SystemExit(0), allow_recoverable=True)
    assert isinstance(out, FatalError)
    assert "SystemExit" in out.message


def test_keyboard_interrupt_propagates():
    with pytest.raises(KeyboardInterrupt):
        ExceptionTranslator().invoke(_raise, KeyboardInterrupt())
