"""Logging setup for the onelo command line."""

import logging
import os
import sys

LOG_LEVEL_ENV = "ONELO_LOG_LEVEL"
DEFAULT_LOG_LEVEL = logging.WARNING
LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def _level_from_name(name: str, origin: str) -> int:
    level = logging.getLevelName(name.upper())
    if isinstance(level, int):
        return level
    print(  # noqa: T201
        f"Warning: Invalid log level {name!r} in {origin}. "
        f"Using {logging.getLevelName(DEFAULT_LOG_LEVEL)}.",
        file=sys.stderr,
    )
    return DEFAULT_LOG_LEVEL


def setup_logging(level: int | str | None = None) -> None:
    """
    Attach a single stderr handler to the ``onelo`` logger.

    ``level`` may be a number, a level name, or None to read ``ONELO_LOG_LEVEL``.
    Unknown names fall back to `DEFAULT_LOG_LEVEL` with a warning on stderr.
    """
    if isinstance(level, int):
        resolved = level
    elif level is not None:
        resolved = _level_from_name(level, "--log-level")
    elif env_level := os.environ.get(LOG_LEVEL_ENV):
        resolved = _level_from_name(env_level, LOG_LEVEL_ENV)
    else:
        resolved = DEFAULT_LOG_LEVEL

    logger = logging.getLogger("onelo")
    logger.setLevel(resolved)

    # sys.stderr is looked up on every call; CliRunner replaces it per invocation.
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
