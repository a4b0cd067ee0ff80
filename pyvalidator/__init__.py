"""
pyvalidator: run user Python validation code inside a result validator.

The host validator calls three entry points per result (init, compare,
cleanup); user scripts register per-application callables in the
``validators`` and ``cleaners`` dicts.
"""

from .core.bridge import (
    ValidatorBridge,
    init_result,
    compare_results,
    cleanup_result,
    install_bridge,
    get_bridge,
)
from .core.models import ResultRecord

__version__ = "0.1.0"

__all__ = [
    "ValidatorBridge",
    "ResultRecord",
    "init_result",
    "compare_results",
    "cleanup_result",
    "install_bridge",
    "get_bridge",
]
