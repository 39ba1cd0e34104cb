"""
Pytest configuration and shared fixtures for MerkleForge tests.
"""

import tempfile
from pathlib import Path
from typing import Generator, List

import pytest


def create_test_config_content(temp_dir: Path, **overrides) -> str:
    """
    Generate test configuration YAML content.
    
    Args:
        temp_dir: Temporary directory for the log file.
        **overrides: Values for the merkle section (encoding, digest_format).
        
    Returns:
        YAML configuration content as string.
    """
    encoding = overrides.get("encoding", "utf-8")
    digest_format = overrides.get("digest_format", "hex")
    
    return f"""
logging:
  level: INFO
  file: {temp_dir}/merkleforge.log
  format: json

merkle:
  encoding: {encoding}
  digest_format: {digest_format}
"""


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """
    Create a temporary directory for test files.
    
    Yields:
        Path to temporary directory that is cleaned up after test.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def small_blocks() -> List[str]:
    """Three data blocks producing a three-level tree."""
    return ["e-markets", "Garden", "Dobra Open-source Lane"]


@pytest.fixture
def medium_blocks() -> List[str]:
    """Ten data blocks producing a five-level tree."""
    return [
        "e-markets", "Shoes Senior",
        "Sharon Gleichner", "Mandy.Block42",
        "MyISAM", "x",
        "Central Operations Facilitator", "Manager",
        "system", "quantifying",
    ]


@pytest.fixture
def test_config_file(temp_dir: Path) -> Path:
    """
    Create a test configuration file.
    
    Returns:
        Path to the configuration file.
    """
    config_path = temp_dir / "config.yaml"
    config_path.write_text(create_test_config_content(temp_dir))
    return config_path


@pytest.fixture
def make_config_file(temp_dir: Path):
    """
    Factory for configuration files with custom merkle settings.
    
    Returns:
        Callable accepting merkle overrides and returning the file path.
    """
    def _make(**overrides) -> Path:
        config_path = temp_dir / "custom_config.yaml"
        config_path.write_text(create_test_config_content(temp_dir, **overrides))
        return config_path
    
    return _make
