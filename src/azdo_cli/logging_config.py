"""Logging setup for azdo-cli."""

import logging

from rich.logging import RichHandler

from azdo_cli.console import err_console

ROOT_LOGGER = "azdo_cli"


def setup_logging(verbose: bool = False) -> None:
    """Configure the package logger.

    Args:
        verbose: Log at DEBUG level instead of WARNING
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.handlers.clear()

    handler = RichHandler(
        console=err_console,
        show_path=False,
        rich_tracebacks=verbose,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Get a named logger below the package root."""
    return logging.getLogger(name)


def log_subprocess_result(
    logger: logging.Logger,
    cmd: list[str],
    returncode: int,
    stdout: str | None,
    stderr: str | None,
    success: bool = True,
) -> None:
    """Record the outcome of a subprocess call.

    Successful calls are logged at DEBUG, failures at WARNING.
    """
    level = logging.DEBUG if success else logging.WARNING
    logger.log(level, f"Command: {' '.join(cmd)} (exit code {returncode})")
    if stdout and stdout.strip():
        logger.debug(f"stdout: {stdout.strip()}")
    if stderr and stderr.strip():
        logger.log(level, f"stderr: {stderr.strip()}")
