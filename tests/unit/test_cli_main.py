"""
Unit tests for CLI main entry point and Merkle commands.

Tests CLI infrastructure including global options, configuration loading,
block input handling and the output of every command.
"""

import base64
import hashlib
import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from merkleforge.cli.main import cli
from merkleforge.cli.merkle import format_digest, read_blocks


SMALL_BLOCKS = ["e-markets", "Garden", "Dobra Open-source Lane"]
SMALL_ROOT = "67cefb11f7e49f4e44e5f6540df70185f3b5ebbc3696eafc2723c1da8fa17efc"


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def missing_config(temp_dir: Path) -> str:
    """Path to a configuration file that does not exist, so defaults apply."""
    return str(temp_dir / "missing.yaml")


class TestCLIMain:
    """Test CLI main entry point."""
    
    def test_cli_help(self, runner):
        """Test CLI help output."""
        result = runner.invoke(cli, ['--help'])
        
        assert result.exit_code == 0
        assert 'MerkleForge' in result.output
        assert '--config' in result.output
        assert '--log-level' in result.output
        assert '--verbose' in result.output
        for command in ('root', 'height', 'level', 'inspect'):
            assert command in result.output
    
    def test_cli_version(self, runner):
        """Test CLI version output."""
        result = runner.invoke(cli, ['--version'])
        
        assert result.exit_code == 0
        assert 'merkleforge' in result.output
    
    def test_cli_with_config_path(self, runner, test_config_file: Path, temp_dir: Path):
        """Test CLI with custom config path writes JSON logs to the configured file."""
        result = runner.invoke(cli, ['--config', str(test_config_file), '--verbose', 'root', 'a'])
        
        assert result.exit_code == 0
        log_content = (temp_dir / "merkleforge.log").read_text()
        assert "cli_configured" in log_content
    
    def test_cli_with_invalid_config(self, runner, temp_dir: Path):
        """Test CLI with an invalid config file exits with an error."""
        config_path = temp_dir / "config.yaml"
        config_path.write_text("logging:\n  level: CHATTY\n")
        
        result = runner.invoke(cli, ['--config', str(config_path), 'root', 'a'])
        
        assert result.exit_code == 1
        assert 'Error: Invalid configuration' in result.output
    
    def test_cli_base64_digest_format(self, runner, make_config_file):
        """Test that the configured digest format is used for output."""
        config_path = make_config_file(digest_format="base64")
        
        result = runner.invoke(cli, ['--config', str(config_path), 'root', *SMALL_BLOCKS])
        
        assert result.exit_code == 0
        assert result.stdout.strip() == base64.b64encode(bytes.fromhex(SMALL_ROOT)).decode("ascii")


class TestRootCommand:
    """Test the root command."""
    
    def test_root(self, runner, missing_config):
        """Test printing the root of positional blocks."""
        result = runner.invoke(cli, ['--config', missing_config, 'root', *SMALL_BLOCKS])
        
        assert result.exit_code == 0
        assert result.stdout.strip() == SMALL_ROOT
    
    def test_root_from_file(self, runner, missing_config, temp_dir: Path):
        """Test reading blocks from a file, one per line."""
        block_file = temp_dir / "blocks.txt"
        block_file.write_text("\n".join(SMALL_BLOCKS) + "\n", encoding="utf-8")
        
        result = runner.invoke(cli, ['--config', missing_config, 'root', '--file', str(block_file)])
        
        assert result.exit_code == 0
        assert result.stdout.strip() == SMALL_ROOT
    
    def test_root_without_blocks(self, runner, missing_config):
        """Test that no blocks is reported as an error."""
        result = runner.invoke(cli, ['--config', missing_config, 'root'])
        
        assert result.exit_code == 1
        assert 'Error: A valid MerkleTree must have at least one data block.' in result.output
    
    def test_root_with_empty_file(self, runner, missing_config, temp_dir: Path):
        """Test that an empty block file is reported as an error."""
        block_file = temp_dir / "blocks.txt"
        block_file.write_text("")
        
        result = runner.invoke(cli, ['--config', missing_config, 'root', '-f', str(block_file)])
        
        assert result.exit_code == 1
        assert 'at least one data block' in result.output
    
    def test_root_with_undecodable_file(self, runner, missing_config, temp_dir: Path):
        """Test that a block file that is not UTF-8 is reported as an error."""
        block_file = temp_dir / "blocks.txt"
        block_file.write_bytes(b"ok\n\xff\xfe\n")
        
        result = runner.invoke(cli, ['--config', missing_config, 'root', '-f', str(block_file)])
        
        assert result.exit_code == 1
        assert 'Error: Failed to read data blocks from' in result.output
        assert not isinstance(result.exception, UnicodeDecodeError)
    
    def test_root_with_unencodable_block(self, runner, make_config_file):
        """Test that a block the configured encoding cannot represent is reported as an error."""
        config_path = make_config_file(encoding="latin-1")
        
        result = runner.invoke(cli, ['--config', str(config_path), 'root', 'Łódź'])
        
        assert result.exit_code == 1
        assert 'Error: Data block #0 cannot be encoded as latin-1' in result.output
    
    def test_root_with_non_text_encoding(self, runner, make_config_file):
        """Test that a bytes-to-bytes codec in the configuration is rejected up front."""
        config_path = make_config_file(encoding="hex")
        
        result = runner.invoke(cli, ['--config', str(config_path), 'root', 'a'])
        
        assert result.exit_code == 1
        assert "Error: Invalid configuration" in result.output
        assert "Unknown text encoding 'hex'" in result.output


class TestHeightCommand:
    """Test the height command."""
    
    @pytest.mark.parametrize("count, expected", [(1, 1), (3, 3), (10, 5)])
    def test_height(self, runner, missing_config, count, expected):
        """Test printing the tree height."""
        blocks = [f"block{i}" for i in range(count)]
        result = runner.invoke(cli, ['--config', missing_config, 'height', *blocks])
        
        assert result.exit_code == 0
        assert result.stdout.strip() == str(expected)


class TestLevelCommand:
    """Test the level command."""
    
    def test_level(self, runner, missing_config):
        """Test printing level 1 digests."""
        result = runner.invoke(cli, ['--config', missing_config, 'level', '1', *SMALL_BLOCKS])
        
        assert result.exit_code == 0
        assert result.stdout.split() == [
            "0a19c403a7e3a0b014367eedf9c2aaec217d290f1bce2367a3c0b91b29df2b21",
            "4d69cacdd7c9f23e2947379ab466222b23a7a0fa11e2b4bd54e39d63a452e70b",
        ]
    
    def test_level_zero(self, runner, missing_config):
        """Test printing the leaves."""
        result = runner.invoke(cli, ['--config', missing_config, 'level', '0', *SMALL_BLOCKS])
        
        assert result.exit_code == 0
        assert result.stdout.split() == [
            hashlib.sha256(block.encode("utf-8")).hexdigest() for block in SMALL_BLOCKS
        ]
    
    def test_level_not_found(self, runner, missing_config):
        """Test that an out-of-range level is reported as an error."""
        result = runner.invoke(cli, ['--config', missing_config, 'level', '42', *SMALL_BLOCKS])
        
        assert result.exit_code == 1
        assert 'Error: MerkleTree Level #42 does not exist' in result.output


class TestInspectCommand:
    """Test the inspect command."""
    
    def test_inspect_text(self, runner, missing_config):
        """Test text output lists every level and the root."""
        result = runner.invoke(cli, ['--config', missing_config, 'inspect', *SMALL_BLOCKS])
        
        assert result.exit_code == 0
        assert 'Leaves: 3' in result.stdout
        assert 'Height: 3' in result.stdout
        assert 'Level 0 (3 digests):' in result.stdout
        assert 'Level 1 (2 digests):' in result.stdout
        assert 'Level 2 (1 digests):' in result.stdout
        assert f'Root: {SMALL_ROOT}' in result.stdout
    
    def test_inspect_json(self, runner, missing_config):
        """Test JSON output."""
        result = runner.invoke(cli, ['--config', missing_config, 'inspect', '--format', 'json', *SMALL_BLOCKS])
        
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["leaf_count"] == 3
        assert data["height"] == 3
        assert [len(level) for level in data["levels"]] == [3, 2, 1]
        assert data["levels"][-1] == [SMALL_ROOT]
        assert data["root"] == SMALL_ROOT


class TestCLIHelpers:
    """Test CLI helper functions."""
    
    def test_read_blocks_positional_only(self):
        """Test positional blocks are returned in order."""
        assert read_blocks(("a", "b"), None) == ["a", "b"]
    
    def test_read_blocks_appends_file_lines(self, temp_dir: Path):
        """Test file blocks follow positional blocks and keep inner empty lines."""
        block_file = temp_dir / "blocks.txt"
        block_file.write_text("c\n\nd\n", encoding="utf-8")
        
        assert read_blocks(("a",), block_file) == ["a", "c", "", "d"]
    
    def test_format_digest(self):
        """Test hex and base64 digest rendering."""
        digest = bytes(range(32))
        
        assert format_digest(digest) == digest.hex()
        assert format_digest(digest, "base64") == base64.b64encode(digest).decode("ascii")
