"""
Core modules: script runtime, result marshalling, registry lookup,
exception translation and the validator callbacks built on them.
"""

from .bridge import ValidatorBridge
from .configuration import BridgeConfiguration, ConfigurationLoader, load_from_env
from .context import ContextArena, ResultContext
from .models import ResultRecord
from .runtime import ScriptRuntime
from .translator import ExceptionTranslator, Ok, RecoverableError, FatalError

__all__ = [
    "ValidatorBridge",
    "BridgeConfiguration",
    "ConfigurationLoader",
    "load_from_env",
    "ContextArena",
    "ResultContext",
    "ResultRecord",
    "ScriptRuntime",
    "ExceptionTranslator",
    "Ok",
    "RecoverableError",
    "FatalError",
]
