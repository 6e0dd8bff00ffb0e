"""
Logger construction for the command line entry point.

Library code never configures logging itself; callers receive a logger from
:func:`get_logger` and hand it to the components explicitly.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def get_logger(
    name: str = "elbman",
    verbose: bool = False,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Return a logger with a single stream handler attached.

    :param name: Logger name.
    :type name: str
    :param verbose: Log at DEBUG level instead of INFO.
    :type verbose: bool
    :param stream: Stream for the handler, stderr by default.
    :type stream: TextIO, optional
    :return: Configured logger.
    :rtype: :class:`logging.Logger`
    """
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    # calling twice must not duplicate every line
    for handler in list(logger.handlers):
        if getattr(handler, "_elbman_handler", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._elbman_handler = True
    logger.addHandler(handler)
    logger.propagate = False
    return logger
