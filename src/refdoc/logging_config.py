"""
Logging for refdoc.

All library modules log under the ``refdoc`` namespace through
``get_logger(__name__)`` and never configure handlers themselves. The CLI
calls ``setup_logging`` once; embedding applications configure ``refdoc``
like any other logger.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "refdoc"

FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def _level(verbose: bool, quiet: bool) -> int:
    if quiet:
        return logging.ERROR
    return logging.DEBUG if verbose else logging.WARNING


def setup_logging(
    verbose: bool = False, quiet: bool = False, log_file: Optional[str] = None
) -> logging.Logger:
    """
    Attach a rich stderr handler (and optionally a file handler) to the
    ``refdoc`` logger.

    ``quiet`` wins over ``verbose``. Calling this again replaces the
    handlers installed by the previous call.
    """
    level = _level(verbose, quiet)
    logger = logging.getLogger(ROOT_LOGGER)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.addHandler(
        RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            tracebacks_show_locals=verbose,
            markup=False,
            show_path=verbose,
        )
    )
    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(file_handler)

    logger.setLevel(level)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger below the ``refdoc`` namespace, e.g. ``get_logger(__name__)``."""
    if not name:
        return logging.getLogger(ROOT_LOGGER)
    if name != ROOT_LOGGER and not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
