"""cargo-dimension scaffolder -- generates new contract projects.

Renders the embedded Jinja2 templates into a fresh directory containing the
contract crate, the integration-test crate and the build/CI files.

Quick usage::

    from cargo_dimension.scaffolder import generate_project

    project_path = generate_project("my_project", "/tmp/output")
"""

from cargo_dimension.scaffolder.generator import (
    FILE_TEMPLATES,
    DirectoryExistsError,
    FileTemplate,
    GenerationIOError,
    GeneratorError,
    InvalidNameError,
    ProjectGenerator,
    ProjectSpec,
    generate_project,
    validate_project_name,
)
from cargo_dimension.scaffolder.templates import TemplateRenderer

__all__ = [
    "FILE_TEMPLATES",
    "DirectoryExistsError",
    "FileTemplate",
    "GenerationIOError",
    "GeneratorError",
    "InvalidNameError",
    "ProjectGenerator",
    "ProjectSpec",
    "TemplateRenderer",
    "generate_project",
    "validate_project_name",
]
