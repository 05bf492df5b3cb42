"""
Trellis render command.

SUMMARY: Render a template to stdout

Resolves a logical template path against the template roots, creates an
instance with the given options and prints the rendered text.
"""

from __future__ import annotations

import argparse

import jinja2

from trellis.cli import (
    OutputFormatter,
    add_standard_flags,
    add_template_path_arg,
    build_registry,
    load_engine_config,
    parse_options,
    setup_cli_logging,
)
from trellis.core.exceptions import TrellisError

SUMMARY = "Render a template to stdout"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_template_path_arg(parser)
    parser.add_argument(
        "--option",
        "-o",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Template option (repeatable; values are parsed as YAML scalars)",
    )
    parser.add_argument(
        "--format",
        "-f",
        help="Output format option (e.g., html, text, graph)",
    )
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    """Render a template - delegates to TemplateRegistry."""
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        config = load_engine_config(args)
        setup_cli_logging(args, config)
        options = parse_options(args.option)
        if args.format:
            options["format"] = args.format

        registry = build_registry(args, config)
        output = registry.run(args.path, options)
    except jinja2.TemplateSyntaxError as exc:
        formatter.error(exc, f"{exc.filename}:{exc.lineno}: {exc.message}", error_code="TemplateSyntaxError")
        return 1
    except jinja2.TemplateError as exc:
        formatter.error(exc, error_code=type(exc).__name__)
        return 1
    except TrellisError as exc:
        formatter.error(exc)
        return 1

    if formatter.json_mode:
        formatter.json_output({"path": args.path, "options": options, "output": output})
    else:
        formatter.text(output, end="")
    return 0
