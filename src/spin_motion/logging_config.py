"""
Logging Configuration
=====================

Every module logs through ``logging.getLogger(__name__)``, so all records
of this package live under the ``spin_motion`` namespace. The library never
installs handlers on import; applications that want to see the evaluation
trace call ``setup_logging`` once:

>>> setup_logging(logging.DEBUG)
>>> get_spin_coords(motions, x, y, z, t)
12:00:01 spin_motion.motion.motion_list DEBUG Evaluating 1 composable and 2 additive ...

Calling it again replaces the handlers it installed earlier and leaves any
handler added by the application untouched.
"""

import logging
import sys
from typing import Optional


PACKAGE_LOGGER = "spin_motion"
DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"

# Handlers created here carry this prefix in their name
_HANDLER_PREFIX = "spin_motion."


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    fmt: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """
    Attach console (and optionally file) handlers to the package logger.

    Parameters
    ----------
    level : int
        Threshold for the package logger and its handlers.
    log_file : str, optional
        Also append records to this file.
    fmt : str
        ``logging.Formatter`` format string.

    Returns
    -------
    logging.Logger
        The ``spin_motion`` logger.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        if (handler.get_name() or "").startswith(_HANDLER_PREFIX):
            logger.removeHandler(handler)
            handler.close()

    handlers = [("console", logging.StreamHandler(sys.stderr))]
    if log_file:
        handlers.append(("file", logging.FileHandler(log_file, encoding="utf-8")))

    formatter = logging.Formatter(fmt, datefmt="%H:%M:%S")
    for name, handler in handlers:
        handler.set_name(_HANDLER_PREFIX + name)
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.debug("Logging configured at %s", logging.getLevelName(level))
    return logger
