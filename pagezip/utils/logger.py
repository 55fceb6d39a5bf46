# pagezip/utils/logger.py
# ============================================================
# Package Logging
# ============================================================
# Every pagezip module logs under the "pagezip" namespace. The
# namespace root owns the one RichHandler (on stderr, so it never
# mixes with CLI tables on stdout); module loggers are plain
# children that inherit its level.
#
#   pagezip                      ← RichHandler, level from settings
#   ├── pagezip.document.decoder
#   └── pagezip.pipeline.orchestrator
#
# Usage:
#   from pagezip.utils.logger import get_logger, set_level
#   logger = get_logger(__name__)
#   set_level("DEBUG")    # e.g. from `pagezip --verbose`
# ============================================================

import logging

from rich.console import Console
from rich.logging import RichHandler

from config.settings import settings

ROOT_LOGGER = "pagezip"


def _root() -> logging.Logger:
    """The namespace logger, with its handler installed on first use."""
    root = logging.getLogger(ROOT_LOGGER)
    if not any(isinstance(h, RichHandler) for h in root.handlers):
        handler = RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            show_path=False,
            markup=True,
            log_time_format="[%X]",
        )
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        root.addHandler(handler)
        root.setLevel(_parse_level(settings.log_level))
        root.propagate = False
    return root


def _parse_level(level: str) -> int:
    value = logging.getLevelName(level.upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return value


def get_logger(name: str) -> logging.Logger:
    """
    Return the logger for `name` inside the pagezip namespace.

    Names outside the namespace (e.g. "__main__") are nested under
    it, so every record goes through the same handler exactly once.

    Example:
        >>> get_logger("pagezip.pipeline.orchestrator").name
        'pagezip.pipeline.orchestrator'
        >>> get_logger("__main__").name
        'pagezip.__main__'
    """
    root = _root()
    if name == ROOT_LOGGER:
        return root
    if not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


def set_level(level: str) -> None:
    """Change the level of every pagezip logger at once."""
    _root().setLevel(_parse_level(level))
