"""
Configuration management for MerkleForge.

Loads YAML configuration from file with sensible defaults and validation.
Supports environment variable substitution using ${ENV_VAR} syntax.
"""

import os
import re
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Optional

import yaml

from merkleforge.exceptions import InvalidConfigurationError
from merkleforge.logging_config import get_logger

logger = get_logger(__name__)


VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
VALID_LOG_FORMATS = ("console", "json")
VALID_DIGEST_FORMATS = ("hex", "base64")


def _expand_env_vars(value: Any) -> Any:
    """
    Recursively expand environment variables in configuration values.

    Supports ${ENV_VAR} syntax with optional default values: ${ENV_VAR:default}

    Args:
        value: Configuration value (string, dict, list, or other)

    Returns:
        Value with environment variables expanded

    Examples:
        "${MERKLEFORGE_LOG_LEVEL}" -> value of MERKLEFORGE_LOG_LEVEL env var
        "${MERKLEFORGE_LOG_LEVEL:INFO}" -> value of MERKLEFORGE_LOG_LEVEL or "INFO" if not set
    """
    if isinstance(value, str):
        # Pattern matches ${VAR} or ${VAR:default}
        pattern = r'\$\{([^}:]+)(?::([^}]*))?\}'

        def replace_env_var(match):
            var_name = match.group(1)
            default_value = match.group(2) if match.group(2) is not None else ""
            return os.environ.get(var_name, default_value)

        return re.sub(pattern, replace_env_var, value)
    elif isinstance(value, dict):
        return {k: _expand_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [_expand_env_vars(item) for item in value]
    else:
        return value


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    file: str = ""
    format: str = "console"  # "console" or "json"


@dataclass
class MerkleConfig:
    """Merkle tree configuration."""

    encoding: str = "utf-8"  # encoding applied to text data blocks
    digest_format: str = "hex"  # "hex" or "base64", CLI display only


@dataclass
class MerkleForgeConfig:
    """Main MerkleForge configuration."""

    logging: LoggingConfig = field(default_factory=LoggingConfig)
    merkle: MerkleConfig = field(default_factory=MerkleConfig)


def get_default_config_path() -> str:
    """Get the default configuration file path."""
    return os.path.expanduser("~/.merkleforge/config.yaml")


def get_default_config() -> MerkleForgeConfig:
    """
    Get default configuration with sensible defaults.

    Returns:
        MerkleForgeConfig: Default configuration object
    """
    return MerkleForgeConfig()


def load_config(config_path: Optional[str] = None) -> MerkleForgeConfig:
    """
    Load configuration from YAML file with validation.

    If config file is not found, returns default configuration.
    If config file is malformed or invalid, raises InvalidConfigurationError.

    Args:
        config_path: Path to configuration file. If None, uses default path.

    Returns:
        MerkleForgeConfig: Loaded and validated configuration

    Raises:
        InvalidConfigurationError: If configuration is invalid or malformed
    """
    if config_path is None:
        config_path = get_default_config_path()

    config_path = os.path.expanduser(str(config_path))

    if not os.path.exists(config_path):
        logger.debug("config_file_not_found", path=config_path)
        return get_default_config()

    try:
        with open(config_path, 'r') as f:
            config_data = yaml.safe_load(f)
        logger.debug("config_file_loaded", path=config_path)
    except yaml.YAMLError as e:
        raise InvalidConfigurationError(
            f"Failed to parse YAML configuration file '{config_path}': {e}"
        ) from e
    except OSError as e:
        raise InvalidConfigurationError(
            f"Failed to read configuration file '{config_path}': {e}"
        ) from e

    # If file is empty, return defaults
    if config_data is None:
        logger.debug("config_file_empty", path=config_path)
        return get_default_config()

    if not isinstance(config_data, dict):
        raise InvalidConfigurationError(
            f"Invalid configuration in '{config_path}': top level must be a mapping"
        )

    config_data = _expand_env_vars(config_data)

    try:
        config = _build_config_from_dict(config_data)
        _validate_config(config)
    except InvalidConfigurationError as e:
        raise InvalidConfigurationError(
            f"Invalid configuration in '{config_path}': {e}"
        ) from e

    logger.debug("config_loaded", path=config_path)
    return config


def _build_section(section_cls, section_name: str, section_data: Any):
    """Build one configuration dataclass from its mapping, rejecting unknown keys."""
    if section_data is None:
        return section_cls()
    if not isinstance(section_data, dict):
        raise InvalidConfigurationError(f"Section '{section_name}' must be a mapping")

    known = {f.name for f in fields(section_cls)}
    unknown = sorted(set(section_data) - known)
    if unknown:
        raise InvalidConfigurationError(
            f"Unknown keys in section '{section_name}': {', '.join(unknown)}"
        )

    return section_cls(**section_data)


def _build_config_from_dict(config_data: Dict[str, Any]) -> MerkleForgeConfig:
    """
    Build MerkleForgeConfig from a parsed configuration dictionary.

    Args:
        config_data: Parsed YAML configuration

    Returns:
        MerkleForgeConfig: Configuration object

    Raises:
        InvalidConfigurationError: If a section is unknown or malformed
    """
    sections = {
        "logging": LoggingConfig,
        "merkle": MerkleConfig,
    }

    unknown = sorted(set(config_data) - set(sections))
    if unknown:
        raise InvalidConfigurationError(f"Unknown configuration sections: {', '.join(unknown)}")

    return MerkleForgeConfig(
        **{
            name: _build_section(section_cls, name, config_data.get(name))
            for name, section_cls in sections.items()
        }
    )


def _validate_config(config: MerkleForgeConfig) -> None:
    """
    Validate configuration values.

    Args:
        config: Configuration to validate

    Raises:
        InvalidConfigurationError: If a value is invalid
    """
    if str(config.logging.level).upper() not in VALID_LOG_LEVELS:
        raise InvalidConfigurationError(
            f"Invalid logging level '{config.logging.level}'. "
            f"Must be one of: {', '.join(VALID_LOG_LEVELS)}"
        )

    if config.logging.format not in VALID_LOG_FORMATS:
        raise InvalidConfigurationError(
            f"Invalid logging format '{config.logging.format}'. "
            f"Must be one of: {', '.join(VALID_LOG_FORMATS)}"
        )

    # bytes-to-bytes codecs such as "hex" are not text encodings
    try:
        "".encode(str(config.merkle.encoding))
    except LookupError:
        raise InvalidConfigurationError(
            f"Unknown text encoding '{config.merkle.encoding}'"
        )

    if config.merkle.digest_format not in VALID_DIGEST_FORMATS:
        raise InvalidConfigurationError(
            f"Invalid digest format '{config.merkle.digest_format}'. "
            f"Must be one of: {', '.join(VALID_DIGEST_FORMATS)}"
        )
