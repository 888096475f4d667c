"""
Logging configuration for livebar.

Records go through the standard logging tree so pytest's log capture sees
them; nothing is ever written straight to the terminal the bar occupies.
"""

import logging

PACKAGE_LOGGER = "livebar"


class NullHandler(logging.Handler):
    """Handler that discards all log records."""

    def emit(self, record):
        pass


def setup_logging(verbose: bool = False) -> logging.Logger:
    """
    Configure the livebar logger.

    A NullHandler keeps Python's last-resort stderr handler from printing
    over the bar when no other handler is configured.

    Args:
        verbose: If True, emit debug records. If False, only warnings.

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    if not any(isinstance(h, NullHandler) for h in logger.handlers):
        logger.addHandler(NullHandler())
    return logger
