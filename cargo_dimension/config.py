"""cargo-dimension configuration.

Typed configuration for the project generator. Every value has a default so
``GeneratorConfig()`` is the configuration used by the CLI; the hidden
override flags only ever add a crate-source override on top of it.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, model_validator


DEFAULT_TOOLCHAIN = "nightly-2022-08-03"


class Dependency(BaseModel):
    """A pinned crates.io dependency of a generated package."""

    model_config = ConfigDict(frozen=True)

    name: str
    version: str

    def toml_line(self) -> str:
        """Return the ``[dependencies]`` entry, e.g. ``dimension-types = "1.4.6"``."""
        return f'{self.name} = "{self.version}"'


# Path of each dimension crate inside a checkout of the node repository.
WORKSPACE_CRATE_PATHS: dict[str, str] = {
    "dimension-contract": "smart_contracts/contract",
    "dimension-engine-test-support": "execution_engine_testing/test_support",
    "dimension-execution-engine": "execution_engine",
    "dimension-types": "types",
}


class GeneratorConfig(BaseModel):
    """Configuration for a single generator run.

    Holds the crate versions and toolchain pinned into the generated files,
    plus an optional override that redirects the ``dimension-*`` crates to a
    local workspace or a git branch via a ``[patch.crates-io]`` section.
    """

    contract: Dependency = Field(
        default_factory=lambda: Dependency(name="dimension-contract", version="1.4.3")
    )
    types: Dependency = Field(
        default_factory=lambda: Dependency(name="dimension-types", version="1.4.6")
    )
    engine_test_support: Dependency = Field(
        default_factory=lambda: Dependency(
            name="dimension-engine-test-support", version="2.0.3"
        )
    )
    execution_engine: Dependency = Field(
        default_factory=lambda: Dependency(
            name="dimension-execution-engine", version="1.4.4"
        )
    )
    toolchain: str = Field(default=DEFAULT_TOOLCHAIN, min_length=1)

    workspace_path: Path | None = Field(
        default=None, description="Local checkout of the node repository"
    )
    git_url: str | None = Field(default=None, description="Git URL of the node repository")
    git_branch: str | None = Field(default=None, description="Branch used with git_url")

    @model_validator(mode="after")
    def ensure_single_override(self) -> "GeneratorConfig":
        if (self.git_url is None) != (self.git_branch is None):
            raise ValueError("git_url and git_branch must be given together")
        if self.workspace_path is not None and self.git_url is not None:
            raise ValueError("workspace_path conflicts with git_url/git_branch")
        return self

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def dependencies(self) -> list[Dependency]:
        """All pinned crates, in the order they appear in a patch section."""
        return sorted(
            [self.contract, self.engine_test_support, self.execution_engine, self.types],
            key=lambda dep: dep.name,
        )

    @property
    def patch_section(self) -> str:
        """The ``[patch.crates-io]`` table for the active override, or ``""``."""
        if self.workspace_path is not None:
            root = self.workspace_path.as_posix()
            entries = [
                f'{dep.name} = {{ path = "{root}/{WORKSPACE_CRATE_PATHS[dep.name]}" }}'
                for dep in self.dependencies
            ]
        elif self.git_url is not None:
            entries = [
                f'{dep.name} = {{ git = "{self.git_url}", branch = "{self.git_branch}" }}'
                for dep in self.dependencies
            ]
        else:
            return ""
        return "[patch.crates-io]\n" + "\n".join(entries) + "\n"

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    @classmethod
    def load(cls, path: Path) -> "GeneratorConfig":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)
