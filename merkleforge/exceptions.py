"""
Exception hierarchy for MerkleForge.

All custom exceptions inherit from MerkleForgeError base class.
"""

from typing import Optional


class MerkleForgeError(Exception):
    """Base exception for all MerkleForge errors."""
    pass


# Merkle Tree Errors
class MerkleTreeError(MerkleForgeError):
    """Base exception for Merkle tree errors."""
    pass


class EmptyInputError(MerkleTreeError, ValueError):
    """Raised when a Merkle tree is created from an empty list of data blocks."""

    def __init__(self, message: str = "A valid MerkleTree must have at least one data block."):
        super().__init__(message)


class LevelNotFoundError(MerkleTreeError, IndexError):
    """Raised when a requested tree level index is outside [0, height)."""

    def __init__(self, index, message: Optional[str] = None):
        self.index = index
        super().__init__(message or f"MerkleTree Level #{index} does not exist")


class InvalidDataBlockError(MerkleTreeError, TypeError):
    """Raised when a data block is not text or bytes-like, or cannot be encoded."""

    def __init__(self, position: int, block: object, reason: Optional[str] = None):
        self.position = position
        if reason is None:
            reason = f"must be str or bytes-like, got {type(block).__name__}"
        super().__init__(f"Data block #{position} {reason}")


class BlockFileError(MerkleTreeError):
    """Raised when a file of data blocks cannot be read or decoded."""
    pass


class MalformedTreeError(MerkleTreeError):
    """Raised when level building and the expected round count disagree."""
    pass


# Configuration Errors
class ConfigurationError(MerkleForgeError):
    """Base exception for configuration-related errors."""
    pass


class InvalidConfigurationError(ConfigurationError):
    """Raised when configuration is invalid or malformed."""
    pass
