"""
Configuration management for MerkleForge.

Handles loading and validation of configuration files.
"""

from merkleforge.config.settings import (
    LoggingConfig,
    MerkleConfig,
    MerkleForgeConfig,
    get_default_config,
    get_default_config_path,
    load_config,
)

__all__ = [
    "LoggingConfig",
    "MerkleConfig",
    "MerkleForgeConfig",
    "get_default_config",
    "get_default_config_path",
    "load_config",
]
