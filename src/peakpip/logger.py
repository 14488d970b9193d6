import logging
import sys

RESET = "\033[0m"


class ColorFormatter(logging.Formatter):
    """Wraps each line in an ANSI color chosen by level; plain when not on a terminal."""

    LEVEL_COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[1;31m",
    }

    def __init__(self, fmt=None, use_color=True):
        super().__init__(fmt)
        self.use_color = use_color

    def format(self, record):
        message = super().format(record)
        color = self.LEVEL_COLORS.get(record.levelno) if self.use_color else None
        return f"{color}{message}{RESET}" if color else message


def setup_logger(name="peakpip", level=logging.INFO):
    logger = logging.getLogger(name)
    logger.setLevel(level)
    # Only attach once; every module calls this at import time
    if not logger.handlers:
        ch = logging.StreamHandler(sys.stderr)
        ch.setFormatter(ColorFormatter("%(message)s", use_color=sys.stderr.isatty()))
        logger.addHandler(ch)
    return logger


def set_verbosity(quiet: bool, verbose: bool, name: str = "peakpip") -> None:
    """Adjust the shared logger level from the --quiet/--verbose flags."""
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO
    logger = logging.getLogger(name)
    logger.setLevel(level)
    for handler in logger.handlers:
        handler.setLevel(level)
