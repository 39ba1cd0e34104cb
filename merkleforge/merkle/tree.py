"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
MerkleForge, a product of Garudex Labs

Binary Merkle tree implementation.

This module builds a SHA-256 Merkle tree over an ordered list of data blocks
and exposes its structure for inspection:
- Leaf hashing of every data block, in input order
- Level-by-level pairwise combination up to a single root
- Height, per-level digest and root queries

An unpaired digest at the end of an odd-sized level is hashed on its own
(H(a)) rather than promoted unchanged or paired with itself.
"""

import hashlib
import time
from typing import Iterable, List, Sequence, Tuple, Union

from merkleforge.exceptions import (
    EmptyInputError,
    InvalidDataBlockError,
    LevelNotFoundError,
    MalformedTreeError,
)
from merkleforge.logging_config import get_logger, log_merkle_tree_construction

logger = get_logger(__name__)

DataBlock = Union[str, bytes, bytearray, memoryview]

# SHA-256 digest size in bytes
DIGEST_SIZE = 32


def hash_data(data: bytes) -> bytes:
    """
    Hash data using SHA-256.

    Args:
        data: Data to hash

    Returns:
        32-byte SHA-256 digest of data
    """
    return hashlib.sha256(data).digest()


def find_pairs(digests: Sequence[bytes]) -> List[Tuple[bytes, ...]]:
    """
    Group digests into consecutive pairs, left to right.

    If there is an odd number of digests, the last group holds a single digest.

    Args:
        digests: Digests of one tree level

    Returns:
        List of (left, right) tuples, possibly ending with a (left,) tuple
    """
    return [tuple(digests[i:i + 2]) for i in range(0, len(digests), 2)]


def combine(pair: Tuple[bytes, ...]) -> bytes:
    """
    Compute the parent digest of a pair.

    A full pair hashes the concatenation of both children (left then right).
    A lone digest is hashed again on its own.

    Args:
        pair: (left, right) or (left,) tuple of digests

    Returns:
        Parent digest
    """
    return hash_data(b"".join(pair))


def _expected_rounds(leaf_count: int) -> int:
    # ceil(log2(n)) without floating point; 0 for a single leaf
    return (leaf_count - 1).bit_length()


def _encode_blocks(data_blocks: Iterable[DataBlock], encoding: str) -> Tuple[bytes, ...]:
    encoded = []
    for position, block in enumerate(data_blocks):
        if isinstance(block, str):
            try:
                encoded.append(block.encode(encoding))
            except (UnicodeError, LookupError) as e:
                raise InvalidDataBlockError(
                    position, block, reason=f"cannot be encoded as {encoding}: {e}"
                ) from e
        elif isinstance(block, (bytes, bytearray, memoryview)):
            encoded.append(bytes(block))
        else:
            raise InvalidDataBlockError(position, block)
    return tuple(encoded)


class MerkleTree:
    """
    Binary Merkle tree built once from an ordered list of data blocks.

    The tree is stored as a list of levels, bottom to top:
    - levels[0] holds one digest per data block, in input order
    - levels[-1] holds the single root digest

    Trees are immutable after construction. Every query returns fresh lists
    of immutable ``bytes`` digests.

    Example:
        >>> tree = create_merkle_tree(["e-markets", "Garden", "Dobra Open-source Lane"])
        >>> tree.height()
        3
        >>> tree.root_hex()
        '67cefb11f7e49f4e44e5f6540df70185f3b5ebbc3696eafc2723c1da8fa17efc'
    """

    def __init__(self, data_blocks: Iterable[DataBlock], encoding: str = "utf-8"):
        """
        Build Merkle tree from data blocks.

        Args:
            data_blocks: Ordered data blocks. Text blocks are encoded with
                ``encoding``; bytes-like blocks are hashed as-is.
            encoding: Text encoding for ``str`` blocks (default: utf-8)

        Raises:
            EmptyInputError: If data_blocks is empty
            InvalidDataBlockError: If a block is neither text nor bytes-like,
                or a text block cannot be encoded
        """
        self._data_blocks = _encode_blocks(data_blocks, encoding)
        if not self._data_blocks:
            raise EmptyInputError()

        self._levels = self._build_levels(self._data_blocks)

    @classmethod
    def create_merkle_tree(cls, data_blocks: Iterable[DataBlock], encoding: str = "utf-8") -> "MerkleTree":
        """
        Create a Merkle tree, logging the construction.

        Args:
            data_blocks: Ordered data blocks
            encoding: Text encoding for ``str`` blocks

        Returns:
            Fully built MerkleTree

        Raises:
            EmptyInputError: If data_blocks is empty
            InvalidDataBlockError: If a block is neither text nor bytes-like
        """
        start_time = time.perf_counter()
        tree = cls(data_blocks, encoding=encoding)
        duration_ms = (time.perf_counter() - start_time) * 1000

        log_merkle_tree_construction(
            logger,
            leaf_count=tree.leaf_count,
            height=tree.height(),
            merkle_root=tree.root_hex(),
            duration_ms=duration_ms,
        )

        return tree

    @staticmethod
    def _build_levels(data_blocks: Tuple[bytes, ...]) -> List[List[bytes]]:
        """
        Build all tree levels bottom-up.

        Level building stops once a level holds a single digest. The number
        of rounds executed is checked against ceil(log2(n)).

        Returns:
            List of levels, each level is a list of digests

        Raises:
            MalformedTreeError: If the round count and the level structure disagree
        """
        current_level = [hash_data(block) for block in data_blocks]
        levels = [current_level]
        rounds = 0

        while len(current_level) > 1:
            current_level = [combine(pair) for pair in find_pairs(current_level)]
            levels.append(current_level)
            rounds += 1

        expected = _expected_rounds(len(data_blocks))
        if rounds != expected:
            raise MalformedTreeError(
                f"Built {rounds} combination rounds for {len(data_blocks)} leaves, expected {expected}"
            )

        return levels

    @property
    def data_blocks(self) -> Tuple[bytes, ...]:
        """Original data blocks as bytes, in input order."""
        return self._data_blocks

    @property
    def leaf_count(self) -> int:
        """Number of leaves (data blocks) in the tree."""
        return len(self._levels[0])

    def height(self) -> int:
        """
        Get the number of levels in the tree.

        Returns:
            Height of the tree (at least 1)
        """
        return len(self._levels)

    def level(self, index: int) -> List[bytes]:
        """
        Get the digests of a tree level, left to right.

        Args:
            index: Level index, 0 for the leaves, height() - 1 for the root

        Returns:
            New list of the level's digests

        Raises:
            LevelNotFoundError: If index is outside [0, height())
        """
        if isinstance(index, bool) or not isinstance(index, int):
            raise LevelNotFoundError(index)
        if index < 0 or index >= len(self._levels):
            raise LevelNotFoundError(index)

        return list(self._levels[index])

    def level_hex(self, index: int) -> List[str]:
        """Get the digests of a tree level as hex strings."""
        return [digest.hex() for digest in self.level(index)]

    def root(self) -> bytes:
        """
        Get the Merkle root digest.

        Returns:
            Root digest of the tree
        """
        return self._levels[-1][0]

    def root_hex(self) -> str:
        """Get the Merkle root digest as a hex string."""
        return self.root().hex()

    def __len__(self) -> int:
        return self.height()

    def __repr__(self) -> str:
        return (
            f"MerkleTree(leaf_count={self.leaf_count}, height={self.height()}, "
            f"root={self.root_hex()[:16]}...)"
        )


def create_merkle_tree(data_blocks: Iterable[DataBlock], encoding: str = "utf-8") -> MerkleTree:
    """
    Create a Merkle tree from ordered data blocks.

    Args:
        data_blocks: Ordered data blocks (str or bytes-like)
        encoding: Text encoding for ``str`` blocks (default: utf-8)

    Returns:
        Fully built MerkleTree

    Raises:
        EmptyInputError: If data_blocks is empty
        InvalidDataBlockError: If a block is neither text nor bytes-like
    """
    return MerkleTree.create_merkle_tree(data_blocks, encoding=encoding)
