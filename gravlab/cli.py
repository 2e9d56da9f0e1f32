"""Command-line entry point."""

from __future__ import annotations

import argparse
import sys
from typing import Sequence

import yaml

from .generate import DEFAULT_INSTANCE_TYPE, generate

VERSION = "0.5.0"
COMMIT = "unknown"
DATE = "unknown"

_DESCRIPTION = """\
Launch secure Jupyter Lab instances on AWS EC2 Graviton processors
with professional-grade security and networking.

Features:
• Session Manager & SSH connection methods
• Private subnet support with NAT Gateway
• Smart security groups and key management
• Built-in environments for data science, ML, and research
• Cost-aware infrastructure with reuse strategies"""


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="gravlab",
        description=_DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"v{VERSION} (commit: {COMMIT}, date: {DATE})",
    )
    commands = parser.add_subparsers(dest="command")

    gen = commands.add_parser(
        "generate",
        help="Generate environment config from local setup",
        description=(
            "Generate an environment configuration file by analyzing your local "
            "Python environment, requirements files, conda environment, or "
            "Jupyter notebooks."
        ),
    )
    gen.add_argument("-s", "--source", default=".", help="Source directory or file to analyze")
    gen.add_argument("-o", "--output", default="", help="Output file path (default: <name>.yaml)")
    gen.add_argument("-n", "--name", default="generated", help="Environment name")
    gen.add_argument(
        "-t",
        "--instance-type",
        default=DEFAULT_INSTANCE_TYPE,
        help="Default instance type",
    )
    gen.add_argument(
        "--scan-notebooks",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Scan .ipynb files for imports",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line and return the exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    try:
        generate(
            args.source,
            args.output,
            args.name,
            args.instance_type,
            args.scan_notebooks,
        )
    except (OSError, yaml.YAMLError) as error:
        print(f"Error: failed to write file: {error}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())