"""
Example auxiliary module with the optional hooks.

update_process is called by init; psutil.NoSuchProcess raised here is
logged and ignored. continue_children is called after cleanup.
"""

import os

import psutil

PID_DIR = os.environ.get("EXAMPLE_PID_DIR", "/tmp/pyvalidator_pids")


def _pid_for(result):
    path = os.path.join(PID_DIR, result.name + ".pid")
    if not os.path.exists(path):
        return None
    with open(path) as f:
        return int(f.read().strip())


def update_process(result):
    pid = _pid_for(result)
    if pid is None:
        return None
    proc = psutil.Process(pid)
    return "%s: process %d is %s" % (result.name, pid, proc.status())


def continue_children(result):
    pid_file = os.path.join(PID_DIR, result.name + ".pid")
    if os.path.exists(pid_file):
        os.remove(pid_file)
