"""
Logging configuration for validator processes.

Validator daemons run unattended, so every record goes to a log file
(``pyvalidator_data/pyvalidator.log`` unless ``log_file`` or
$PYVALIDATOR_LOG_FILE says otherwise). The console only shows warnings and
worse by default; fatal aborts are logged at CRITICAL right before exit.
"""

import logging
import sys
import os
from pathlib import Path
from typing import Optional

LOG_PATH = Path("pyvalidator_data") / "pyvalidator.log"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class _SyncedFileHandler(logging.FileHandler):
    """File handler that fsyncs after each flush when ``fsync`` is set."""

    def __init__(self, filename, *, fsync=False):
        super().__init__(filename, mode="a", encoding="utf-8")
        self.fsync = bool(fsync)

    def flush(self):
        try:
            super().flush()
            if self.fsync and self.stream is not None:
                os.fsync(self.stream.fileno())
        except (OSError, ValueError):
            # stream closed or not backed by a real file
            pass


def _env_flag(name: str) -> bool:
    v = os.environ.get(name)
    if v is None:
        return False
    return v not in ("0", "false", "False", "no", "NO", "")


def log_level(name: str) -> int:
    """Numeric level for ``name``; raises ValueError for unknown names."""
    key = str(name).upper()
    if key not in LOG_LEVELS:
        raise ValueError(f"Unknown log level {name!r}; expected one of {', '.join(LOG_LEVELS)}")
    return getattr(logging, key)


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    format_string: Optional[str] = None,
    console_level: Optional[str] = None,
) -> logging.Logger:
    """
    Route validator logging to a file and a quiet console.

    Args:
        level: File and root level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Log file path; defaults to $PYVALIDATOR_LOG_FILE, then LOG_PATH
        format_string: Custom format string
        console_level: Level of the stdout handler (WARNING if not given)

    Returns:
        The "pyvalidator" logger
    """
    file_level = log_level(level)
    console = log_level(console_level or "WARNING")
    formatter = logging.Formatter(format_string or DEFAULT_FORMAT)

    if log_file is None:
        log_file = os.environ.get("PYVALIDATOR_LOG_FILE") or LOG_PATH
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(min(file_level, console))
    for h in list(root.handlers):
        root.removeHandler(h)

    fh = _SyncedFileHandler(log_path, fsync=_env_flag("PYVALIDATOR_LOG_FSYNC"))
    fh.setFormatter(formatter)
    fh.setLevel(file_level)
    root.addHandler(fh)

    ch = logging.StreamHandler(sys.stdout)
    ch.setLevel(console)
    ch.setFormatter(formatter)
    root.addHandler(ch)

    return logging.getLogger("pyvalidator")
