"""Configuration loader for azure-blob-sas."""
import logging
from pathlib import Path
from typing import Any, Dict, Optional
import yaml

from .policy import DEFAULT_VALIDITY_CHOICES, parse_duration

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(Exception):
    """Configuration error exception."""
    pass


def default_config_path() -> Path:
    return Path.home() / ".config" / "azure-blob-sas" / "config.yml"


def _get_config_path(config_path: Optional[str] = None) -> Optional[str]:
    """
    Get config file path.

    Priority order:
    1. Explicit path (the --config option); it must exist
    2. Default location: ~/.config/azure-blob-sas/config.yml, if present

    The file is only ever read; nothing is written to disk.

    Returns:
        Path to config file, or None when no config file exists

    Raises:
        ConfigError: If an explicit path does not point to a file
    """
    if config_path:
        explicit = Path(config_path).expanduser()
        if not explicit.is_file():
            raise ConfigError(f"Config file not found: {explicit}")
        logger.info(f"Using config from --config: {explicit}")
        return str(explicit)

    default_config = default_config_path()
    if default_config.is_file():
        logger.info(f"Using default config location: {default_config}")
        return str(default_config)

    logger.debug("No config file found, using built-in defaults")
    return None


def _default_config() -> Dict[str, Any]:
    return {
        "validity": {"choices": list(DEFAULT_VALIDITY_CHOICES)},
        "logging": {"level": None},
    }


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load and validate configuration from YAML file.

    The file is optional; every section falls back to built-in defaults.

    Args:
        config_path: Explicit config file, overriding the default location

    Returns:
        Dict containing configuration with keys:
        - validity: dict with choices (list of policy.Duration)
        - logging: dict with level (str or None)

    Raises:
        ConfigError: If the config file is missing, unreadable, not valid YAML or has invalid values
    """
    config = _default_config()

    config_path = _get_config_path(config_path)
    if config_path is None:
        return config

    try:
        with open(config_path, 'r') as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse YAML config at {config_path}: {e}")
    except OSError as e:
        raise ConfigError(f"Failed to read config file at {config_path}: {e}")

    if raw is None:
        logger.info(f"Config file at {config_path} is empty, using defaults")
        return config

    if not isinstance(raw, dict):
        raise ConfigError(f"Config file at {config_path} must contain a mapping")

    validity = raw.get("validity") or {}
    if not isinstance(validity, dict):
        raise ConfigError("'validity' section must be a mapping")

    if "choices" in validity:
        choices = validity["choices"]
        if not isinstance(choices, list) or not choices:
            raise ConfigError(
                "'validity.choices' must be a non-empty list\n"
                "Required format:\n"
                "validity:\n"
                "  choices: [15m, 1h, 1d, 1mo, 1y]"
            )
        try:
            config["validity"]["choices"] = [parse_duration(choice) for choice in choices]
        except ValueError as e:
            raise ConfigError(f"Invalid 'validity.choices' in {config_path}: {e}")

    logging_section = raw.get("logging") or {}
    if not isinstance(logging_section, dict):
        raise ConfigError("'logging' section must be a mapping")

    level = logging_section.get("level")
    if level is not None:
        level = str(level).upper()
        if level not in LOG_LEVELS:
            raise ConfigError(
                f"Unsupported logging level: {logging_section['level']}\n"
                f"Use one of: {', '.join(LOG_LEVELS)}"
            )
        config["logging"]["level"] = level

    logger.info(f"Configuration loaded successfully from {config_path}")
    logger.debug(f"Validity choices: {', '.join(str(c) for c in config['validity']['choices'])}")

    return config
