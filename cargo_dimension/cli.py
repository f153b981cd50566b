"""Command line entry point for cargo-dimension.

Usage::

    cargo dimension my_project
    cargo-dimension my_project --output ~/contracts
    python -m cargo_dimension.cli my_project
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from pydantic import ValidationError
from rich.markup import escape

from cargo_dimension import __version__
from cargo_dimension.config import GeneratorConfig
from cargo_dimension.scaffolder import FILE_TEMPLATES, GeneratorError, generate_project
from cargo_dimension.utils import console, print_error, print_success, print_summary_table

# Matches the exit status cargo uses for a failed subcommand.
FAILURE_EXIT_CODE = 101

SUBCOMMAND_NAME = "dimension"

USAGE = """cargo dimension [OPTIONS] <project-name>
    cd <project-name>
    make prepare
    make test"""


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cargo-dimension",
        usage=USAGE,
        description="Create a wasm contract and tests for use on the Dimension platform.",
    )
    parser.add_argument(
        "project_name",
        metavar="project-name",
        help="Name of the new project; also the folder created for the contract and tests",
    )
    parser.add_argument(
        "--output", "-o",
        default=".",
        help="Directory the project folder is created in (default: current directory)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    # Hidden: point the generated Cargo.toml files at a local or git copy of the node crates.
    parser.add_argument("--workspace-path", default=None, help=argparse.SUPPRESS)
    parser.add_argument("--git-url", default=None, help=argparse.SUPPRESS)
    parser.add_argument("--git-branch", default=None, help=argparse.SUPPRESS)
    # Hidden: JSON GeneratorConfig; the flags above win over its values.
    parser.add_argument("--config", default=None, help=argparse.SUPPRESS)
    return parser


def _strip_subcommand(argv: list[str]) -> list[str]:
    """Drop the ``dimension`` token cargo inserts when run as ``cargo dimension``.

    ``cargo-dimension dimension`` is ambiguous: it could be a request to create
    a project named ``dimension``.  Being invoked by cargo without a project
    name is the more likely case, so the token is always dropped.
    """
    if argv and argv[0] == SUBCOMMAND_NAME:
        return argv[1:]
    return argv


def _load_config(args: argparse.Namespace) -> GeneratorConfig:
    base = GeneratorConfig.load(Path(args.config)) if args.config else GeneratorConfig()
    overrides = {
        "workspace_path": args.workspace_path,
        "git_url": args.git_url,
        "git_branch": args.git_branch,
    }
    overrides = {key: value for key, value in overrides.items() if value is not None}
    if not overrides:
        return base
    return GeneratorConfig.model_validate({**base.model_dump(), **overrides})


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns the process exit status."""
    if argv is None:
        argv = sys.argv[1:]
    args = _build_parser().parse_args(_strip_subcommand(list(argv)))

    try:
        config = _load_config(args)
    except ValidationError as exc:
        messages = "; ".join(err["msg"] for err in exc.errors())
        print_error(f"invalid configuration: {messages}")
        return FAILURE_EXIT_CODE
    except OSError as exc:
        print_error(f"failed to read config '{args.config}': {exc}")
        return FAILURE_EXIT_CODE

    try:
        project_root = generate_project(args.project_name, args.output, config)
    except GeneratorError as exc:
        print_error(str(exc))
        return FAILURE_EXIT_CODE

    print_summary_table(
        {template.relative_path: "created" for template in FILE_TEMPLATES},
        title=f"Created {escape(str(project_root))}",
    )
    print_success(f"Project '{args.project_name}' created at {project_root}")
    console.print(
        f"    cd {project_root}\n    make prepare\n    make test",
        markup=False,
        highlight=False,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
