"""
Configuration loading for the license decisions tooling.

Configuration is a YAML file with three optional sections:

    decisions_file:
      path: doc/dependency_decisions.yml
    inheritance:
      timeout_seconds: 30
    logging:
      level: INFO

Components receive plain dicts and read keys with .get(key, default).
"""
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
KNOWN_SECTIONS = ("decisions_file", "inheritance", "logging")


class ConfigError(ValueError):
    """Raised when configuration is present but invalid."""


def load_config(config_path: str = "config.yaml") -> Dict[str, Any]:
    """
    Load and validate a YAML configuration file.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Configuration mapping (empty sections omitted)

    Raises:
        FileNotFoundError: If the file does not exist
        ConfigError: If the file is not a valid configuration
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(path) as f:
        try:
            config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    return validate_config(config)


def validate_config(config: Optional[Any]) -> Dict[str, Any]:
    """
    Check section types and values.

    Raises:
        ConfigError: On the first invalid value found
    """
    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigError(f"Config must be a mapping, got {type(config).__name__}")

    for section in KNOWN_SECTIONS:
        value = config.get(section)
        if value is not None and not isinstance(value, dict):
            raise ConfigError(f"Config section '{section}' must be a mapping")

    unknown = set(config) - set(KNOWN_SECTIONS)
    if unknown:
        logger.warning(f"Ignoring unknown config sections: {', '.join(sorted(unknown))}")

    timeout = (config.get("inheritance") or {}).get("timeout_seconds")
    if timeout is not None:
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
            raise ConfigError(f"inheritance.timeout_seconds must be a positive number, got {timeout!r}")

    path = (config.get("decisions_file") or {}).get("path")
    if path is not None and not isinstance(path, str):
        raise ConfigError(f"decisions_file.path must be a string, got {path!r}")

    level = (config.get("logging") or {}).get("level")
    if level is not None and not isinstance(logging.getLevelName(str(level).upper()), int):
        raise ConfigError(f"Unknown logging level: {level!r}")

    return config


def configure_logging(config: Optional[Dict[str, Any]] = None) -> None:
    """Apply logging.basicConfig using the `logging` config section."""
    level = ((config or {}).get("logging") or {}).get("level", "INFO")
    logging.basicConfig(level=getattr(logging, str(level).upper()), format=LOG_FORMAT)
