"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
MerkleForge, a product of Garudex Labs

MerkleForge - Binary Merkle tree construction and inspection.

MerkleForge builds SHA-256 Merkle trees over ordered data blocks and exposes
their height, per-level digests and root.
"""

from merkleforge._version import __version__

__all__ = ["__version__"]
