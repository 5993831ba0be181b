"""Logging setup for **SiteCensus**.

Every module logs under the ``SiteCensus`` hierarchy (``SiteCensus.crawler``,
``SiteCensus.fetcher`` ...). :func:`configure` attaches the handlers to the
parent logger once, so children only need ``logging.getLogger``::

    from site_census.logger import logger
    logger.info("Crawl started")
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, TextIO, Union

DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOGGER_NAME: Final[str] = "SiteCensus"

# aiohttp logs every connection hiccup; the fetcher already reports them
_NOISY_LOGGERS: Final[tuple[str, ...]] = ("aiohttp.client", "aiohttp.internal")

_LevelT = Union[int, str]


def _file_handler(file: Path | str, fmt: logging.Formatter) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        filename=str(file),
        maxBytes=5 * 1024 * 1024,
        backupCount=3,
        encoding="utf-8",
    )
    handler.setFormatter(fmt)
    return handler


def configure(
    *,
    level: _LevelT = "INFO",
    log_file: str | Path | None = None,
    log_format: str = DEFAULT_FORMAT,
    stream: TextIO | None = None,
    replace_handlers: bool = True,
) -> logging.Logger:
    """(Re)configure the project logger and return it.

    Parameters
    ----------
    level
        Numeric or textual level (``"DEBUG"``, ``logging.INFO`` ...).
    log_file
        Optional logfile, rotated at 5 MiB with three backups.
    log_format
        Format string for :class:`logging.Formatter`.
    stream
        Console stream; defaults to the *current* ``sys.stdout``.
    replace_handlers
        Close and drop handlers from a previous call first.
    """
    lg = logging.getLogger(LOGGER_NAME)
    lg.setLevel(level)

    if replace_handlers:
        for handler in list(lg.handlers):
            lg.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(log_format)
    console = logging.StreamHandler(stream if stream is not None else sys.stdout)
    console.setFormatter(formatter)
    lg.addHandler(console)

    if log_file is not None:
        lg.addHandler(_file_handler(log_file, formatter))

    lg.propagate = False
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(logging.WARNING, lg.level))
    return lg


logger: logging.Logger = configure()

__all__ = ["logger", "configure", "DEFAULT_FORMAT", "LOGGER_NAME"]
