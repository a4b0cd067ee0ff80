import pytest

from pyvalidator.core.marshal import RESULT_SYMBOL, ScriptResult, build_proxy, marshal
from pyvalidator.core.models import ResultRecord
from pyvalidator.core.runtime import ScriptRuntime


def test_marshal_exposes_fields_unchanged():
    rt = ScriptRuntime()
    rt.initialize()
    r = ResultRecord(name="wu_123", appid=42, id=7, workunitid=3)
    proxy = marshal(rt, r, ["/upload/a/wu_123_0"])
    assert rt.namespace[RESULT_SYMBOL] is proxy
    # read back the way a script would
    exec("seen = (a.name, a.appid, list(a.paths), a.id, a.workunitid)", rt.namespace)
    assert rt.namespace["seen"] == ("wu_123", 42, ["/upload/a/wu_123_0"], 7, 3)


def test_marshal_overwrites_previous_binding():
    rt = ScriptRuntime()
    rt.initialize()
    marshal(rt, ResultRecord(name="first", appid=1), [])
    marshal(rt, ResultRecord(name="second", appid=2), [], symbol="a")
    assert rt.namespace["a"].name == "second"


def test_custom_symbol():
    rt = ScriptRuntime()
    rt.initialize()
    marshal(rt, ResultRecord(name="wu", appid=1), [], symbol="result")
    assert "result" in rt.namespace and "a" not in rt.namespace


def test_proxy_copies_paths_and_is_read_only():
    paths = ["/x"]
    proxy = build_proxy(ResultRecord(name="wu", appid=1), paths)
    paths.append("/y")
    assert proxy.paths == ["/x"]
    assert isinstance(proxy, ScriptResult)
    with pytest.raises(AttributeError):
        proxy.name = "other"
    assert proxy.name == "wu"
