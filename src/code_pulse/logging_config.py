"""
Logging configuration for Code Pulse.

Everything logs under the ``code_pulse`` namespace through a rich handler on
stderr, so stdout stays free for command output such as ``--json``.

Level policy:
    quiet     ERROR    persistence failures only
    default   WARNING  fallbacks, unreadable saves, complexity alerts
    detailed  INFO     adds per-save metric summaries and session flushes
    verbose   DEBUG    adds every scheduling decision
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER_NAME = "code_pulse"

FILE_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def resolve_level(verbose: bool = False, quiet: bool = False, detailed: bool = False) -> int:
    """Pick the package log level. ``quiet`` wins over everything else."""
    if quiet:
        return logging.ERROR
    if verbose:
        return logging.DEBUG
    if detailed:
        return logging.INFO
    return logging.WARNING


def setup_logging(
    verbose: bool = False,
    quiet: bool = False,
    log_file: Optional[str] = None,
    detailed: bool = False,
) -> logging.Logger:
    """
    Attach handlers to the ``code_pulse`` logger.

    Calling it again replaces the handlers from the previous call, so a
    long-lived process can switch levels after reloading its config.

    Args:
        verbose: Enable DEBUG level logging
        quiet: Suppress all but ERROR level logging
        log_file: Optional file path to append logs to
        detailed: Enable INFO level logging (``enable_detailed_logging``)

    Returns:
        Configured logger instance for code_pulse
    """
    level = resolve_level(verbose=verbose, quiet=quiet, detailed=detailed)

    handlers: list[logging.Handler] = [
        RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            tracebacks_show_locals=verbose,
            markup=False,
            show_time=True,
            show_path=verbose,
        )
    ]

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a")
        file_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        handlers.append(file_handler)

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()
    for handler in handlers:
        logger.addHandler(handler)
    logger.setLevel(level)

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger instance for a specific module.

    Args:
        name: Module name (e.g., 'code_pulse.tracking.scheduler').
              If None, returns the root code_pulse logger

    Returns:
        Logger instance
    """
    if name is None:
        return logging.getLogger(ROOT_LOGGER_NAME)

    if not name.startswith(ROOT_LOGGER_NAME):
        name = f"{ROOT_LOGGER_NAME}.{name}"

    return logging.getLogger(name)
