#!/usr/bin/env python3
"""
pyvalidator: command line checks for validator script deployments

Commands:
  pyvalidator check CFG            # verify every app has a validator and a cleaner
  pyvalidator run CFG A.yaml B.yaml  # run init/compare/cleanup on two results
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import yaml

from pyvalidator.core.bridge import ValidatorBridge
from pyvalidator.core.configuration import ConfigurationLoader
from pyvalidator.core.errors import ScriptLoadError
from pyvalidator.core.models import ResultRecord
from pyvalidator.core.registry import CLEANERS, VALIDATORS, Found, resolve
from pyvalidator.core.runtime import ScriptRuntime
from pyvalidator.utils.logging_config import setup_logging

EXIT_MISMATCH = 2


def load_result(path: Path) -> ResultRecord:
    """Read a result record from YAML; relative output_files resolve against its directory."""
    path = Path(path)
    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}
    files = [str(p) if Path(p).is_absolute() else str(path.parent / p) for p in data.get("output_files", [])]
    data["output_files"] = files
    return ResultRecord.model_validate(data)


def _registry_keys(runtime: ScriptRuntime) -> List[str]:
    keys = set()
    for name in (VALIDATORS, CLEANERS):
        registry = runtime.namespace.get(name)
        if isinstance(registry, dict):
            keys.update(str(k) for k in registry)
    return sorted(keys)


def cmd_check(args: argparse.Namespace) -> int:
    config = ConfigurationLoader(Path(args.config)).load_configuration()
    setup_logging(level=config.log_level, log_file=config.log_file)
    runtime = ScriptRuntime.from_config(config)
    try:
        runtime.initialize()
    except ScriptLoadError as e:
        print(f"error: {e}")
        return 1

    appids = [str(a) for a in (args.appid or [])] or _registry_keys(runtime)
    if not appids:
        print("No applications registered in validators or cleaners.")
        return 1

    incomplete = 0
    for appid in appids:
        row = []
        for registry_name in (VALIDATORS, CLEANERS):
            found = resolve(runtime.namespace, registry_name, appid)
            row.append("ok" if isinstance(found, Found) else f"MISSING ({found.reason})")
            if not isinstance(found, Found):
                incomplete += 1
        print(f"app {appid}: {VALIDATORS}={row[0]} {CLEANERS}={row[1]}")

    try:
        aux = runtime.import_aux()
    except (Exception, SystemExit) as e:
        # init_result would abort on this module
        print(f"auxiliary module {config.aux_module}: broken ({type(e).__name__}: {e})")
        incomplete += 1
    else:
        print(f"auxiliary module {config.aux_module}: {'found' if aux is not None else 'not found'}")
    runtime.finalize()
    return 0 if incomplete == 0 else 1


def cmd_run(args: argparse.Namespace) -> int:
    config = ConfigurationLoader(Path(args.config)).load_configuration()
    setup_logging(level=config.log_level, log_file=config.log_file, console_level=args.console_level)
    r1 = load_result(Path(args.result_a))
    r2 = load_result(Path(args.result_b))

    bridge = ValidatorBridge.from_config(config)
    _, ctx1 = bridge.init_result(r1)
    _, ctx2 = bridge.init_result(r2)
    _, match = bridge.compare_results(r1, ctx1, r2, ctx2)
    rc1 = bridge.cleanup_result(r1, ctx1)
    rc2 = bridge.cleanup_result(r2, ctx2)
    if rc1 or rc2:
        logging.getLogger("pyvalidator").warning("continue_children failed during cleanup")

    print(f"{r1.name} vs {r2.name}: {'match' if match else 'no match'}")
    return 0 if match else EXIT_MISMATCH


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="pyvalidator", description="Check and exercise validator scripts")
    sub = parser.add_subparsers(dest="cmd")

    p_check = sub.add_parser("check", help="Verify registries cover every application")
    p_check.add_argument("config", help="Path to bridge YAML config")
    p_check.add_argument("--appid", action="append", type=int, help="Application id to check; can repeat")
    p_check.set_defaults(func=cmd_check)

    p_run = sub.add_parser("run", help="Run the validation lifecycle on two results")
    p_run.add_argument("config", help="Path to bridge YAML config")
    p_run.add_argument("result_a", help="YAML file describing the first result")
    p_run.add_argument("result_b", help="YAML file describing the second result")
    p_run.add_argument("--console-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"], default="WARNING")
    p_run.set_defaults(func=cmd_run)

    args = parser.parse_args(argv)
    if not hasattr(args, "func"):
        parser.print_help()
        return 1
    return int(args.func(args))

if __name__ == "__main__":
    sys.exit(main())
