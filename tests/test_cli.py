import sys
import textwrap

import pytest

from pyvalidator.scripts.pyvalidator import load_result, main

SCRIPT = """
def same_size(r1, p1, r2, p2):
    return [open(p).read() for p in p1] == [open(p).read() for p in p2]

def keep(result, paths):
    return True

validators = {"1": same_size}
cleaners = {"1": keep, "2": keep}
"""


@pytest.fixture
def deployment(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "validators.py").write_text(SCRIPT)
    (tmp_path / "bridge.yaml").write_text("scripts: [validators.py]\naux_module: pyvalidator_cli_hooks\n")
    for name, content in (("a", "E=1.0\n"), ("b", "E=1.0\n"), ("c", "E=2.0\n")):
        (tmp_path / f"out_{name}.txt").write_text(content)
        (tmp_path / f"result_{name}.yaml").write_text(textwrap.dedent(f"""
            name: wu_1_{name}
            appid: 1
            output_files: [out_{name}.txt]
        """))
    return tmp_path


def test_load_result_resolves_files(deployment):
    r = load_result(deployment / "result_a.yaml")
    assert r.name == "wu_1_a" and r.appid == 1
    assert r.output_files == [str(deployment / "out_a.txt")]


def test_check_reports_missing_validator(deployment, capsys):
    assert main(["check", str(deployment / "bridge.yaml")]) == 1
    out = capsys.readouterr().out
    assert "app 1: validators=ok cleaners=ok" in out
    assert "app 2: validators=MISSING" in out
    assert main(["check", str(deployment / "bridge.yaml"), "--appid", "1"]) == 0


def test_run_match_and_mismatch(deployment, capsys):
    cfg = str(deployment / "bridge.yaml")
    assert main(["run", cfg, "result_a.yaml", "result_b.yaml"]) == 0
    assert "wu_1_a vs wu_1_b: match" in capsys.readouterr().out
    assert main(["run", cfg, "result_a.yaml", "result_c.yaml"]) == 2


def test_run_unregistered_app_exits_fatally(deployment):
    (deployment / "result_x.yaml").write_text("name: wu_9\nappid: 9\n")
    with pytest.raises(SystemExit) as info:
        main(["run", str(deployment / "bridge.yaml"), "result_x.yaml", "result_x.yaml"])
    assert info.value.code == 1


def test_no_command_prints_help(capsys):
    assert main([]) == 1


def test_check_reports_broken_aux_module(deployment, capsys):
    (deployment / "pyvalidator_cli_broken.py").write_text("import pyvalidator_cli_missing_dep\n")
    (deployment / "bridge.yaml").write_text(
        "scripts: [validators.py]\nsearch_path: [.]\naux_module: pyvalidator_cli_broken\n"
    )
    try:
        assert main(["check", str(deployment / "bridge.yaml"), "--appid", "1"]) == 1
    finally:
        sys.modules.pop("pyvalidator_cli_broken", None)
    out = capsys.readouterr().out
    assert "auxiliary module pyvalidator_cli_broken: broken (ModuleNotFoundError" in out
    assert str(deployment) not in sys.path


def test_run_same_result_twice(deployment, capsys):
    cfg = str(deployment / "bridge.yaml")
    assert main(["run", cfg, "result_a.yaml", "result_a.yaml"]) == 0
    assert "wu_1_a vs wu_1_a: match" in capsys.readouterr().out
