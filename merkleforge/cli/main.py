"""
CLI entry point for MerkleForge.

Provides a command-line interface for building Merkle trees over data blocks
and inspecting their height, levels and root.
"""

import sys
from pathlib import Path
from typing import Optional

import click

from merkleforge._version import __version__
from merkleforge.config.settings import get_default_config_path, load_config
from merkleforge.exceptions import InvalidConfigurationError
from merkleforge.logging_config import get_logger, setup_logging
from merkleforge.cli.context import CLIContext, pass_context
from merkleforge.cli.merkle import height, inspect, level, root


@click.group()
@click.option(
    '--config',
    '-c',
    type=click.Path(exists=False, dir_okay=False, path_type=Path),
    default=None,
    help=f'Path to configuration file (default: {get_default_config_path()})',
)
@click.option(
    '--log-level',
    '-l',
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'], case_sensitive=False),
    default=None,
    help='Set logging level (overrides configuration)',
)
@click.option(
    '--verbose',
    '-v',
    is_flag=True,
    help='Enable verbose output',
)
@click.version_option(version=__version__, prog_name='merkleforge')
@pass_context
def cli(ctx: CLIContext, config: Optional[Path], log_level: Optional[str], verbose: bool):
    """
    MerkleForge - Binary Merkle tree construction and inspection.

    Builds a SHA-256 Merkle tree over ordered data blocks and prints its
    height, levels or root.
    """
    ctx.verbose = verbose
    ctx.config_path = str(config) if config else None

    # Route logs through stdlib before configuration is read
    setup_logging(level=log_level or "WARNING", json_format=False)

    try:
        ctx.config = load_config(ctx.config_path)
    except InvalidConfigurationError as e:
        click.echo(f"Error: Invalid configuration: {e}", err=True)
        sys.exit(1)

    effective_log_level = log_level.upper() if log_level else ctx.config.logging.level.upper()
    log_file = Path(ctx.config.logging.file).expanduser() if ctx.config.logging.file else None
    json_format = ctx.config.logging.format == "json"

    try:
        setup_logging(
            level=effective_log_level,
            log_file=log_file,
            json_format=json_format,
        )
    except OSError as e:
        click.echo(f"Error: Failed to set up logging: {e}", err=True)
        sys.exit(1)

    if verbose:
        logger = get_logger("cli")
        logger.info("cli_configured", config_path=ctx.config_path or "defaults", log_level=effective_log_level)


cli.add_command(root)
cli.add_command(height)
cli.add_command(level)
cli.add_command(inspect)


def main():
    """Console script entry point."""
    cli()


if __name__ == '__main__':
    main()
