"""Shared pytest fixtures for the cargo-dimension test suite.

Provides reusable fixtures for:
- Output directories under ``tmp_path``
- Default and override generator configurations
- A project generated once per test with the default configuration
- A snapshot helper for comparing whole directory trees
"""

from __future__ import annotations

from pathlib import Path

import pytest

from cargo_dimension.config import GeneratorConfig
from cargo_dimension.scaffolder import generate_project


EXPECTED_FILES: frozenset[str] = frozenset({
    "contract/.cargo/config.toml",
    "contract/Cargo.toml",
    "contract/src/main.rs",
    "tests/Cargo.toml",
    "tests/src/integration_tests.rs",
    "Makefile",
    "rust-toolchain",
    ".travis.yml",
})


# ---------------------------------------------------------------------------
# Paths & Directories
# ---------------------------------------------------------------------------

@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    """Empty directory that projects are generated into."""
    out = tmp_path / "out"
    out.mkdir()
    return out


@pytest.fixture
def expected_files() -> frozenset[str]:
    """Relative paths of every file a generated project must contain."""
    return EXPECTED_FILES


# ---------------------------------------------------------------------------
# Configurations
# ---------------------------------------------------------------------------

@pytest.fixture
def default_config() -> GeneratorConfig:
    return GeneratorConfig()


@pytest.fixture
def workspace_config(tmp_path: Path) -> GeneratorConfig:
    """Config that patches the dimension crates to a local checkout."""
    return GeneratorConfig(workspace_path=tmp_path / "dimension-node")


@pytest.fixture
def git_config() -> GeneratorConfig:
    """Config that patches the dimension crates to a git branch."""
    return GeneratorConfig(
        git_url="https://github.com/dimension-labs/dimension-node",
        git_branch="dev",
    )


# ---------------------------------------------------------------------------
# Generated projects
# ---------------------------------------------------------------------------

@pytest.fixture
def generated_project(output_dir: Path) -> Path:
    """Root of ``my_project`` generated with the default configuration."""
    return generate_project("my_project", output_dir)


def snapshot_tree(root: Path) -> dict[str, bytes]:
    """Map every file under *root* (relative POSIX path) to its bytes."""
    return {
        p.relative_to(root).as_posix(): p.read_bytes()
        for p in sorted(root.rglob("*"))
        if p.is_file()
    }


@pytest.fixture
def snapshot():
    """Expose :func:`snapshot_tree` to tests."""
    return snapshot_tree
