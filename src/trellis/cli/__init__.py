"""
Trellis CLI package.

Commands live in ``cli/commands`` and are discovered automatically.

Framework utilities for building CLI commands:
- _output: Output formatting (JSON/text modes)
- _args: Common argument registration helpers
- _utils: Shared CLI utilities
"""
from ._output import OutputFormatter
from ._args import (
    add_json_flag,
    add_verbose_flag,
    add_config_flags,
    add_template_path_arg,
    add_standard_flags,
)
from ._utils import (
    build_registry,
    load_engine_config,
    parse_options,
    setup_cli_logging,
)

__all__ = [
    # Output formatting
    "OutputFormatter",
    # Argument helpers
    "add_json_flag",
    "add_verbose_flag",
    "add_config_flags",
    "add_template_path_arg",
    "add_standard_flags",
    # Utilities
    "build_registry",
    "load_engine_config",
    "parse_options",
    "setup_cli_logging",
]
