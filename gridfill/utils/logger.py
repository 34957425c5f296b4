"""Logging setup shared by the library modules and the CLI.

Library modules only ask for loggers under the ``gridfill`` namespace and
never touch the root logger. Output appears once an application calls
:func:`configure_logging` (the CLI does) or configures logging itself.
"""

from __future__ import annotations

import logging
from typing import IO, Optional

PACKAGE_LOGGER = "gridfill"
LOG_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"

logging.getLogger(PACKAGE_LOGGER).addHandler(logging.NullHandler())


def configure_logging(level: int = logging.INFO, stream: Optional[IO[str]] = None) -> logging.Handler:
    """Attach a formatted stream handler to the ``gridfill`` logger.

    Calling it again replaces the handler installed by the previous call, so
    repeated CLI runs in one process do not duplicate output.
    """

    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt="%H:%M:%S"))
    handler.set_name("gridfill-cli")

    logger = logging.getLogger(PACKAGE_LOGGER)
    for existing in list(logger.handlers):
        if existing.get_name() == "gridfill-cli":
            logger.removeHandler(existing)
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return handler


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger inside the ``gridfill`` namespace."""

    if not name:
        return logging.getLogger(PACKAGE_LOGGER)
    if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + "."):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)
