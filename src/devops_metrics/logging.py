"""Loguru setup for sync runs.

Every sync record carries the repository (and, inside the per-PR phases, the
PR number) it belongs to; console and file output render that as a short
``owner/name#number`` label. Standard library loggers (SQLAlchemy, httpx via
githubkit) are routed through loguru so everything lands in the same sinks.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any, Literal

from loguru import logger

if TYPE_CHECKING:
    from loguru import Logger

LogLevel = Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

# Third-party stdlib loggers: (threshold when debugging, threshold otherwise)
LIBRARY_LEVELS: dict[str, tuple[int, int]] = {
    "sqlalchemy.engine": (logging.INFO, logging.WARNING),
    "httpx": (logging.DEBUG, logging.WARNING),
    "httpcore": (logging.INFO, logging.WARNING),
}

_CONSOLE_FORMAT = (
    "<dim>{time:YYYY-MM-DD HH:mm:ss}</dim> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[context]}</cyan> - "
    "<level>{message}</level>\n{exception}"
)
_FILE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | "
    "{extra[context]} | {function}:{line} | {message}\n{exception}"
)

_configured = False


class InterceptHandler(logging.Handler):
    """Route standard library log records into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Walk out of the logging module so loguru reports the real caller
        frame = logging.currentframe()
        depth = 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def context_label(extra: dict[str, Any], default: str) -> str:
    """Short label for a record's bound sync context.

    ``repo`` wins over the bound module name; a bound ``pr`` is appended
    as ``#number``.
    """
    label = extra.get("repo") or extra.get("name") or default
    if "pr" in extra:
        label = f"{label}#{extra['pr']}"
    return str(label)


def _with_context(template: str):
    def formatter(record: Any) -> str:
        record["extra"]["context"] = context_label(record["extra"], record["name"])
        return template

    return formatter


def _effective_level(level: LogLevel, verbose: bool, quiet: bool) -> LogLevel:
    if verbose:
        return "DEBUG"
    if quiet:
        return "WARNING"
    return level


def setup_logging(
    level: LogLevel = "INFO",
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_file: Path | None = None,
    rotation: str = "10 MB",
    retention: str = "7 days",
    serialize: bool = False,
) -> Logger:
    """Configure the console sink and, optionally, a rotating file sink.

    Args:
        level: Base log level from settings
        verbose: Force DEBUG (wins over ``quiet``)
        quiet: Force WARNING
        log_file: Path of a rotating log file, always written at DEBUG
        rotation: Loguru rotation condition, e.g. "10 MB" or "1 day"
        retention: How long rotated files are kept
        serialize: Write the file sink as JSON lines

    Returns:
        The configured loguru logger
    """
    global _configured

    effective = _effective_level(level, verbose, quiet)
    logger.remove()
    logger.add(
        sys.stderr,
        level=effective,
        format=_with_context(_CONSOLE_FORMAT),
        colorize=True,
        backtrace=True,
        diagnose=False,
    )

    if log_file:
        logger.add(
            log_file,
            level="DEBUG",
            format=_with_context(_FILE_FORMAT),
            rotation=rotation,
            retention=retention,
            compression="gz",
            serialize=serialize,
        )

    _route_library_logging(effective)
    _configured = True
    return logger


def _route_library_logging(level: LogLevel) -> None:
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    debugging = level in ("TRACE", "DEBUG")
    for name, (debug_level, normal_level) in LIBRARY_LEVELS.items():
        logging.getLogger(name).setLevel(debug_level if debugging else normal_level)


def get_logger(name: str) -> Logger:
    """Logger with the module name bound, e.g. ``get_logger(__name__)``."""
    return logger.bind(name=name)


def bind_repo(owner: str, repo: str) -> Logger:
    """Logger bound to one repository's sync."""
    return logger.bind(name="sync", repo=f"{owner}/{repo}")


def bind_pr(owner: str, repo: str, pr_number: int) -> Logger:
    """Logger bound to one pull request within a repository's sync."""
    return logger.bind(name="sync", repo=f"{owner}/{repo}", pr=pr_number)


def is_configured() -> bool:
    return _configured


def reset_logging() -> None:
    """Remove all sinks (used by tests)."""
    global _configured
    logger.remove()
    _configured = False
