"""
Merkle tree construction and inspection.

This module provides SHA-256 Merkle tree construction from ordered data blocks
and queries over the resulting levels and root.
"""

from merkleforge.merkle.tree import (
    DIGEST_SIZE,
    MerkleTree,
    combine,
    create_merkle_tree,
    find_pairs,
    hash_data,
)

__all__ = [
    "DIGEST_SIZE",
    "MerkleTree",
    "combine",
    "create_merkle_tree",
    "find_pairs",
    "hash_data",
]
