"""
Logging setup and utilities.

Every module logs under the "branchline" namespace through get_logger(__name__).
Nothing is printed until a host calls init_logger(); library use stays silent
(a NullHandler is attached to the namespace root).

Levels
- WARNING: build-time conflicts (duplicate commands).
- DEBUG: tree statistics, plan compilation, each token claimed while matching.

Configuration
- init_logger(debug=True) or the BRANCHLINE_DEBUG environment variable
  ("1", "true", "yes", "on") switch the namespace to DEBUG.
- init_logger(filename=...) adds a plain-text file handler next to the rich
  screen handler.
"""
import logging
import os

from rich.console import Console
from rich.logging import RichHandler

NAMESPACE = "branchline"

logging.getLogger(NAMESPACE).addHandler(logging.NullHandler())


class LogObjects:
    """Handlers installed by init_logger() (kept so repeated calls stay idempotent)."""

    handlers: list[logging.Handler] = []


def is_debug() -> bool:
    """Return True when BRANCHLINE_DEBUG asks for debug output."""
    return os.environ.get("BRANCHLINE_DEBUG", "").strip().lower() in ("1", "true", "yes", "on")


def init_logger(filename: str | None = None, *, debug: bool = False) -> None:
    """Install screen (and optionally file) handlers on the namespace logger.

    Args:
        filename: Optional filename to log to
        debug: If True, force debug level
    """
    logger = logging.getLogger(NAMESPACE)
    for handler in LogObjects.handlers:
        logger.removeHandler(handler)
    LogObjects.handlers.clear()

    screen = RichHandler(console=Console(stderr=True), show_time=False, show_path=debug or is_debug())
    screen.setFormatter(logging.Formatter(r"%(message)s"))
    LogObjects.handlers.append(screen)

    if filename:
        file_handler = logging.FileHandler(filename)
        file_handler.setFormatter(
            logging.Formatter(fmt=r"%(asctime)s [%(levelname)s] %(name)s :: %(message)s :: %(filename)s:%(lineno)d")
        )
        LogObjects.handlers.append(file_handler)

    for handler in LogObjects.handlers:
        logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if debug or is_debug() else logging.WARNING)


def get_logger(name: str = NAMESPACE, level: int | None = None) -> logging.Logger:
    """Return a logger inside the branchline namespace.

    Args:
        name: logger's name ("branchline.tree"); names outside the namespace are prefixed
        level: logger's level (inherited from the namespace if not set)

    Returns:
        The logger instance
    """
    if name != NAMESPACE and not name.startswith(NAMESPACE + "."):
        name = f"{NAMESPACE}.{name}"
    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(level)
    return logger


__all__ = (
    "LogObjects",
    "get_logger",
    "init_logger",
    "is_debug",
)
