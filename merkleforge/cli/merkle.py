"""
CLI commands for Merkle tree inspection.

Provides commands for:
- Printing the root digest of a set of data blocks
- Printing the tree height
- Printing the digests of a single level
- Dumping the whole tree as text or JSON
"""

import base64
import json
import sys
from pathlib import Path
from typing import List, Optional, Tuple

import click

from merkleforge.cli.context import CLIContext, pass_context
from merkleforge.exceptions import BlockFileError, EmptyInputError, MerkleForgeError
from merkleforge.merkle import MerkleTree, create_merkle_tree


def read_blocks(blocks: Tuple[str, ...], block_file: Optional[Path]) -> List[str]:
    """
    Collect data blocks from positional arguments and an optional file.

    File blocks are read one per line and follow the positional blocks.

    Args:
        blocks: Blocks given on the command line
        block_file: Optional path to a file with one block per line

    Returns:
        Ordered list of data blocks

    Raises:
        BlockFileError: If the file cannot be read or is not valid UTF-8
    """
    collected = list(blocks)
    if block_file is not None:
        try:
            content = block_file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise BlockFileError(f"Failed to read data blocks from '{block_file}': {e}") from e
        collected.extend(content.splitlines())
    return collected


def format_digest(digest: bytes, digest_format: str = "hex") -> str:
    """
    Render a digest for display.

    Args:
        digest: Raw digest bytes
        digest_format: "hex" or "base64"

    Returns:
        Printable digest
    """
    if digest_format == "base64":
        return base64.b64encode(digest).decode("ascii")
    return digest.hex()


def _build_tree(ctx: CLIContext, blocks: Tuple[str, ...], block_file: Optional[Path]) -> MerkleTree:
    data_blocks = read_blocks(blocks, block_file)
    if not data_blocks:
        raise EmptyInputError()
    return create_merkle_tree(data_blocks, encoding=ctx.config.merkle.encoding)


block_file_option = click.option(
    "--file",
    "-f",
    "block_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Read data blocks from a file, one block per line",
)


@click.command("root")
@click.argument("blocks", nargs=-1)
@block_file_option
@pass_context
def root(ctx: CLIContext, blocks: Tuple[str, ...], block_file: Optional[Path]):
    """
    Print the Merkle root of BLOCKS.

    Examples:

        merkleforge root e-markets Garden "Dobra Open-source Lane"

        merkleforge root --file blocks.txt
    """
    try:
        tree = _build_tree(ctx, blocks, block_file)
    except MerkleForgeError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(format_digest(tree.root(), ctx.config.merkle.digest_format))


@click.command("height")
@click.argument("blocks", nargs=-1)
@block_file_option
@pass_context
def height(ctx: CLIContext, blocks: Tuple[str, ...], block_file: Optional[Path]):
    """Print the number of levels of the tree built from BLOCKS."""
    try:
        tree = _build_tree(ctx, blocks, block_file)
    except MerkleForgeError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(tree.height())


@click.command("level")
@click.argument("index", type=int)
@click.argument("blocks", nargs=-1)
@block_file_option
@pass_context
def level(ctx: CLIContext, index: int, blocks: Tuple[str, ...], block_file: Optional[Path]):
    """
    Print the digests of level INDEX, one per line.

    Level 0 holds the leaves; the last level holds the root.
    """
    try:
        tree = _build_tree(ctx, blocks, block_file)
        digests = tree.level(index)
    except MerkleForgeError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    for digest in digests:
        click.echo(format_digest(digest, ctx.config.merkle.digest_format))


@click.command("inspect")
@click.argument("blocks", nargs=-1)
@block_file_option
@click.option(
    "--format",
    "-o",
    "output_format",
    type=click.Choice(["text", "json"], case_sensitive=False),
    default="text",
    help="Output format",
)
@pass_context
def inspect(ctx: CLIContext, blocks: Tuple[str, ...], block_file: Optional[Path], output_format: str):
    """Print the height, every level and the root of the tree built from BLOCKS."""
    try:
        tree = _build_tree(ctx, blocks, block_file)
    except MerkleForgeError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    digest_format = ctx.config.merkle.digest_format
    levels = [
        [format_digest(digest, digest_format) for digest in tree.level(index)]
        for index in range(tree.height())
    ]
    tree_root = format_digest(tree.root(), digest_format)

    if output_format.lower() == "json":
        click.echo(json.dumps({
            "leaf_count": tree.leaf_count,
            "height": tree.height(),
            "levels": levels,
            "root": tree_root,
        }, indent=2))
        return

    click.echo(f"Leaves: {tree.leaf_count}")
    click.echo(f"Height: {tree.height()}")
    for index, digests in enumerate(levels):
        click.echo(f"Level {index} ({len(digests)} digests):")
        for digest in digests:
            click.echo(f"  {digest}")
    click.echo(f"Root: {tree_root}")
