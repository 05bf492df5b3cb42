"""
Trellis - hierarchical template composition.

Trellis renders output text from a tree of named sections. Each section is
satisfied by a custom operation, a template file found along a composed
search path, or a nested template, and may hand control of its own
subsections to whatever renders it.
"""

import logging

__version__ = "1.0.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = ["__version__"]
