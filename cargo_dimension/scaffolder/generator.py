"""Main scaffolding orchestrator.

Takes a ``ProjectSpec`` (project name + target directory) and writes the
contract crate, the integration-test crate and the project-level build and CI
files described by ``FILE_TEMPLATES``.
"""

from __future__ import annotations

import re
import stat
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..config import GeneratorConfig
from .templates import TemplateRenderer


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class GeneratorError(Exception):
    """Base class for every failure reported by the generator."""


class InvalidNameError(GeneratorError, ValueError):
    """Raised when a project name is not a valid package identifier."""


class DirectoryExistsError(GeneratorError, FileExistsError):
    """Raised when the project directory is already present."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"destination '{path}' already exists")


class GenerationIOError(GeneratorError, OSError):
    """Raised when the destination cannot be inspected or a file cannot be written."""

    def __init__(self, action: str, path: Path, cause: OSError) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"failed to {action} '{path}': {cause}")


# ---------------------------------------------------------------------------
# Name validation
# ---------------------------------------------------------------------------

MAX_NAME_LENGTH = 64

_NAME_PATTERN = re.compile(r"[A-Za-z][A-Za-z0-9_-]*")

# Rust keywords (strict and reserved) plus crate names cargo refuses.
RESERVED_NAMES: frozenset[str] = frozenset({
    "abstract", "alloc", "as", "async", "await", "become", "box", "break",
    "const", "continue", "core", "crate", "do", "dyn", "else", "enum",
    "extern", "false", "final", "fn", "for", "if", "impl", "in", "let",
    "loop", "macro", "match", "mod", "move", "mut", "override", "priv",
    "pub", "ref", "return", "self", "static", "std", "struct", "super",
    "test", "trait", "true", "try", "type", "typeof", "unsafe", "unsized",
    "use", "virtual", "where", "while", "yield",
})


def validate_project_name(name: str) -> str:
    """Return *name* unchanged if it can be used as a package identifier.

    Raises:
        InvalidNameError: With the specific rule the name breaks.
    """
    if not name:
        raise InvalidNameError("project name must not be empty")
    if len(name) > MAX_NAME_LENGTH:
        raise InvalidNameError(
            f"project name '{name}' is longer than {MAX_NAME_LENGTH} characters"
        )
    if not name[0].isascii() or not name[0].isalpha():
        raise InvalidNameError(
            f"project name '{name}' must start with an ASCII letter"
        )
    if not _NAME_PATTERN.fullmatch(name):
        bad = sorted({ch for ch in name if not (ch.isascii() and (ch.isalnum() or ch in "-_"))})
        raise InvalidNameError(
            f"project name '{name}' contains invalid characters: {''.join(bad)!r} "
            "(only ASCII letters, digits, '-' and '_' are allowed)"
        )
    if name.lower() in RESERVED_NAMES:
        raise InvalidNameError(f"project name '{name}' is a reserved Rust name")
    return name


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------


class ProjectSpec(BaseModel):
    """What to generate and where."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Project name (directory and package name)")
    target_directory: Path = Field(
        default_factory=Path.cwd, description="Directory the project is created in"
    )

    @field_validator("name")
    @classmethod
    def ensure_valid_name(cls, value: str) -> str:
        return validate_project_name(value)

    @property
    def project_root(self) -> Path:
        return self.target_directory / self.name


class FileTemplate(BaseModel):
    """One file of the generated tree."""

    model_config = ConfigDict(frozen=True)

    relative_path: str = Field(..., description="Output path relative to the project root")
    template: str = Field(..., description="Template name relative to the template directory")
    executable: bool = Field(default=False)


FILE_TEMPLATES: tuple[FileTemplate, ...] = (
    FileTemplate(
        relative_path="contract/.cargo/config.toml",
        template="contract/cargo/config.toml.j2",
    ),
    FileTemplate(relative_path="contract/Cargo.toml", template="contract/Cargo.toml.j2"),
    FileTemplate(relative_path="contract/src/main.rs", template="contract/src/main.rs.j2"),
    FileTemplate(relative_path="tests/Cargo.toml", template="tests/Cargo.toml.j2"),
    FileTemplate(
        relative_path="tests/src/integration_tests.rs",
        template="tests/src/integration_tests.rs.j2",
    ),
    FileTemplate(relative_path="Makefile", template="Makefile.j2"),
    FileTemplate(relative_path="rust-toolchain", template="rust-toolchain.j2"),
    FileTemplate(relative_path=".travis.yml", template="travis.yml.j2"),
)


# ---------------------------------------------------------------------------
# Main generator
# ---------------------------------------------------------------------------


class ProjectGenerator:
    """Writes a new contract project to disk.

    Given a ``ProjectSpec``, generates:
    - ``contract/``: the contract crate and its wasm build-target config
    - ``tests/``: the integration-test crate
    - ``Makefile``, ``rust-toolchain`` and ``.travis.yml`` at the root

    The project root must not exist beforehand.  Every template is rendered
    before anything is written; an ``OSError`` while writing aborts the run
    and leaves the files written so far in place.
    """

    def __init__(
        self,
        spec: ProjectSpec,
        config: GeneratorConfig | None = None,
        templates: Iterable[FileTemplate] = FILE_TEMPLATES,
    ) -> None:
        self.spec = spec
        self.config = config or GeneratorConfig()
        self.templates = tuple(templates)
        self.renderer = TemplateRenderer()

    # -- Public API --------------------------------------------------------

    def generate(self) -> Path:
        """Generate the project and return the path to its root.

        Raises:
            DirectoryExistsError: If the project root already exists.
            GenerationIOError: If the project root cannot be inspected or any
                directory or file cannot be written.
        """
        project_root = self.spec.project_root
        if _is_taken(project_root):
            raise DirectoryExistsError(project_root)

        rendered = self.render_all()

        _create_root(project_root)
        for template, content in rendered:
            path = project_root / template.relative_path
            _write_file(path, content)
            if template.executable:
                _make_executable(path)

        return project_root

    def render_all(self) -> list[tuple[FileTemplate, str]]:
        """Render every template in memory, in table order."""
        context = self._build_context()
        return [
            (template, self.renderer.render(template.template, context))
            for template in self.templates
        ]

    # -- Context building --------------------------------------------------

    def _build_context(self) -> dict[str, Any]:
        """Build the Jinja2 template context from the ProjectSpec and config."""
        config = self.config
        return {
            "project_name": self.spec.name,
            "contract_dependency": config.contract.toml_line(),
            "types_dependency": config.types.toml_line(),
            "engine_test_support_dependency": config.engine_test_support.toml_line(),
            "execution_engine_dependency": config.execution_engine.toml_line(),
            "toolchain": config.toolchain,
            "patch_section": config.patch_section,
        }


def generate_project(
    name: str,
    output_dir: str | Path = ".",
    config: GeneratorConfig | None = None,
) -> Path:
    """Validate *name* and generate ``<output_dir>/<name>``.

    The name is checked before the filesystem is touched, so an invalid name
    raises ``InvalidNameError`` without creating anything.
    """
    validate_project_name(name)
    spec = ProjectSpec(name=name, target_directory=Path(output_dir))
    return ProjectGenerator(spec, config).generate()


# ---------------------------------------------------------------------------
# Filesystem helpers
# ---------------------------------------------------------------------------

def _is_taken(path: Path) -> bool:
    """Whether anything, including a dangling symlink, already sits at *path*."""
    try:
        return path.is_symlink() or path.exists()
    except OSError as exc:
        raise GenerationIOError("access", path, exc) from exc


def _create_root(path: Path) -> None:
    """Create the project root, failing if something else created it first."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.mkdir()
    except FileExistsError as exc:
        if _is_taken(path):
            raise DirectoryExistsError(path) from exc
        raise GenerationIOError("create", path.parent, exc) from exc
    except OSError as exc:
        raise GenerationIOError("create", path, exc) from exc


def _write_file(path: Path, content: str) -> None:
    """Create parent dirs and write *content* with ``\\n`` line endings."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise GenerationIOError("create", path.parent, exc) from exc
    try:
        with path.open("w", encoding="utf-8", newline="\n") as fh:
            fh.write(content)
    except OSError as exc:
        raise GenerationIOError("write to", path, exc) from exc


def _make_executable(path: Path) -> None:
    """Set the executable bit on a file."""
    try:
        current = path.stat().st_mode
        path.chmod(current | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    except OSError as exc:
        raise GenerationIOError("set permissions on", path, exc) from exc
