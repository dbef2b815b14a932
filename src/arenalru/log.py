"""Logging setup for the arenalru command line.

Library modules only ever call ``logging.getLogger("arenalru.<module>")``;
handlers are attached here, on demand, by the CLI.
"""

from __future__ import annotations

import logging
import sys

ROOT_LOGGER = "arenalru"
LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_FORMAT = "%(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "WARNING", *, stream: object | None = None) -> logging.Logger:
    """Attach one stderr handler to the ``arenalru`` logger and set its level.

    Calling this more than once replaces the handler instead of stacking them.
    """

    name = level.upper()
    if name not in LEVELS:
        raise ValueError(f"unknown log level: {level!r}")

    logger = logging.getLogger(ROOT_LOGGER)
    for h in list(logger.handlers):
        if getattr(h, "_arenalru", False):
            logger.removeHandler(h)

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)  # type: ignore[arg-type]
    handler.setFormatter(logging.Formatter(_FORMAT))
    handler._arenalru = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, name))
    return logger
