"""
Configuration management for the validator bridge.

This module loads and validates the YAML file that tells the bridge which
user scripts to run, where to find the auxiliary hook module and how to
locate result output files.

Example:

    scripts:
      - validators.py
    search_path:
      - .
    aux_module: boinctools
    upload_dir: /home/boinc/projects/test/upload
    fanout: 1024
"""

import os
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional
from dataclasses import dataclass, field

import yaml

from .files import DEFAULT_FANOUT
from ..utils.logging_config import LOG_LEVELS

logger = logging.getLogger(__name__)

CONFIG_ENV = "PYVALIDATOR_CONFIG"


@dataclass
class BridgeConfiguration:
    """Complete bridge configuration."""
    scripts: List[Path] = field(default_factory=list)
    search_path: List[Path] = field(default_factory=list)
    aux_module: str = "boinctools"
    result_symbol: str = "a"
    recoverable_exceptions: List[str] = field(default_factory=lambda: ["NoSuchProcess"])
    upload_dir: Optional[Path] = None
    fanout: int = DEFAULT_FANOUT
    log_level: str = "INFO"
    log_file: Optional[Path] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any], base_dir: Optional[Path] = None) -> 'BridgeConfiguration':
        """Create BridgeConfiguration from dictionary, resolving paths against base_dir."""
        base = Path(base_dir) if base_dir is not None else Path.cwd()

        def _path(p: Any) -> Path:
            path = Path(str(p)).expanduser()
            return path if path.is_absolute() else base / path

        upload_dir = data.get('upload_dir')
        log_file = data.get('log_file')
        return cls(
            scripts=[_path(p) for p in data.get('scripts', [])],
            search_path=[_path(p) for p in data.get('search_path', [])],
            aux_module=data.get('aux_module', 'boinctools'),
            result_symbol=data.get('result_symbol', 'a'),
            recoverable_exceptions=list(data.get('recoverable_exceptions', ['NoSuchProcess'])),
            upload_dir=_path(upload_dir) if upload_dir else None,
            fanout=int(data.get('fanout', DEFAULT_FANOUT)),
            log_level=str(data.get('log_level', 'INFO')).upper(),
            log_file=_path(log_file) if log_file else None,
        )


class ConfigurationLoader:
    """YAML configuration file loader and validator."""

    def __init__(self, config_path: Path):
        """Initialize configuration loader."""
        self.config_path = Path(config_path)
        self.config_dir = self.config_path.parent

    def load_configuration(self) -> BridgeConfiguration:
        """Load and validate YAML configuration."""
        logger.info(f"Loading configuration from {self.config_path}")

        with open(self.config_path, 'r') as f:
            raw_config = yaml.safe_load(f) or {}

        self._validate_configuration(raw_config)

        config = BridgeConfiguration.from_dict(raw_config, base_dir=self.config_dir)
        logger.info(f"Configuration loaded: {len(config.scripts)} script(s), aux module '{config.aux_module}'")
        return config

    def _validate_configuration(self, config: Dict[str, Any]) -> None:
        """Validate required configuration sections and their types."""
        if not isinstance(config, dict):
            raise ValueError("Configuration must be a mapping")

        if 'scripts' not in config:
            raise ValueError("Missing required section: scripts")

        for section in ('scripts', 'search_path', 'recoverable_exceptions'):
            if section in config and not isinstance(config[section], list):
                raise ValueError(f"Section '{section}' must be a list")

        for section in ('aux_module', 'result_symbol'):
            value = config.get(section)
            # aux_module may be dotted (package.module)
            if value is not None and (
                not isinstance(value, str) or not all(p.isidentifier() for p in value.split('.'))
            ):
                raise ValueError(f"Section '{section}' must be a Python identifier, got {value!r}")
        if '.' in str(config.get('result_symbol', '')):
            raise ValueError("Section 'result_symbol' must not be dotted")

        fanout = config.get('fanout', DEFAULT_FANOUT)
        if not isinstance(fanout, int) or fanout < 0:
            raise ValueError(f"fanout must be a non-negative integer, got {fanout!r}")

        level = config.get('log_level', 'INFO')
        if not isinstance(level, str) or level.upper() not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}, got {level!r}")


def load_from_env() -> BridgeConfiguration:
    """Load the configuration named by $PYVALIDATOR_CONFIG, or defaults if unset."""
    path = os.environ.get(CONFIG_ENV)
    if not path:
        logger.warning(f"{CONFIG_ENV} is not set; running without user scripts")
        return BridgeConfiguration()
    return ConfigurationLoader(Path(path)).load_configuration()
