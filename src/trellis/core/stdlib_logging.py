from __future__ import annotations

import logging
import sys
from pathlib import Path

_CONFIGURED_TARGET: str | None = None
_TRELLIS_HANDLER: logging.Handler | None = None

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _level_from_name(name: str) -> int:
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(level: str = "WARNING", *, log_path: Path | None = None) -> None:
    """Configure the ``trellis`` logger to write to stderr or to ``log_path``.

    Idempotent per-process: if already configured for the same target, only
    the level is updated.
    """
    global _CONFIGURED_TARGET, _TRELLIS_HANDLER

    target = str(Path(log_path).resolve()) if log_path is not None else "<stderr>"
    logger = logging.getLogger("trellis")
    logger.setLevel(_level_from_name(level))

    if _CONFIGURED_TARGET == target and _TRELLIS_HANDLER is not None:
        _TRELLIS_HANDLER.setLevel(_level_from_name(level))
        return

    # Replace the Trellis-installed handler when switching targets.
    if _TRELLIS_HANDLER is not None:
        logger.removeHandler(_TRELLIS_HANDLER)
        _TRELLIS_HANDLER.close()
        _TRELLIS_HANDLER = None

    handler: logging.Handler
    if log_path is not None:
        Path(target).parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(target, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(_level_from_name(level))
    handler.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(handler)

    _TRELLIS_HANDLER = handler
    _CONFIGURED_TARGET = target


def reset_logging_for_tests() -> None:
    """Test-only: remove the handler installed by configure_logging."""
    global _CONFIGURED_TARGET, _TRELLIS_HANDLER
    if _TRELLIS_HANDLER is not None:
        logging.getLogger("trellis").removeHandler(_TRELLIS_HANDLER)
        _TRELLIS_HANDLER.close()
    _CONFIGURED_TARGET = None
    _TRELLIS_HANDLER = None


__all__ = ["configure_logging", "reset_logging_for_tests"]
