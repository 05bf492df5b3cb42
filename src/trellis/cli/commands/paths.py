"""
Trellis paths command.

SUMMARY: Show a template's composed search path

Lists the directories searched, in priority order, when a section of the
template is rendered, followed by the templates composed into it.
"""

from __future__ import annotations

import argparse

from trellis.cli import (
    OutputFormatter,
    add_standard_flags,
    add_template_path_arg,
    build_registry,
    load_engine_config,
    setup_cli_logging,
)
from trellis.core.exceptions import TrellisError

SUMMARY = "Show a template's composed search path"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_template_path_arg(parser)
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        config = load_engine_config(args)
        setup_cli_logging(args, config)
        definition = build_registry(args, config).resolve(args.path)
    except TrellisError as exc:
        formatter.error(exc)
        return 1

    search_paths = [str(p) for p in definition.search_paths()]
    ancestors = [a.path for a in definition.ancestors()]
    if formatter.json_mode:
        formatter.json_output({"path": definition.path, "search_paths": search_paths, "ancestors": ancestors})
        return 0

    formatter.text(f"{definition.path}:")
    for index, path in enumerate(search_paths, start=1):
        formatter.text(f"  {index}. {path}")
    if ancestors:
        formatter.text("composes: " + ", ".join(ancestors))
    return 0
