"""Common CLI argument registration utilities."""
from __future__ import annotations

import argparse


def add_json_flag(parser: argparse.ArgumentParser) -> None:
    """Add --json flag for JSON output mode."""
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )


def add_verbose_flag(parser: argparse.ArgumentParser) -> None:
    """Add --verbose flag (debug logging to stderr)."""
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose output",
    )


def add_config_flags(parser: argparse.ArgumentParser) -> None:
    """Add --config, --project-root and --templates flags.

    Args:
        parser: ArgumentParser to add the flags to
    """
    parser.add_argument(
        "--config",
        type=str,
        help="Path to a trellis.yaml configuration file",
    )
    parser.add_argument(
        "--project-root",
        type=str,
        help="Directory searched for trellis.yaml (default: current directory)",
    )
    parser.add_argument(
        "--templates",
        "-t",
        action="append",
        default=[],
        metavar="DIR",
        help="Template root, searched before configured roots (repeatable)",
    )


def add_template_path_arg(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("path", help="Logical template path (e.g., 'default/html')")


def add_standard_flags(parser: argparse.ArgumentParser) -> None:
    """Add the flags shared by every command."""
    add_config_flags(parser)
    add_json_flag(parser)
    add_verbose_flag(parser)


__all__ = [
    "add_json_flag",
    "add_verbose_flag",
    "add_config_flags",
    "add_template_path_arg",
    "add_standard_flags",
]
