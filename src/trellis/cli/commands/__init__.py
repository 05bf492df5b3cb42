"""Top-level Trellis commands."""
