import logging
import sys
from colorlog import ColoredFormatter

LOGGER_NAME = "appservice_deployer"

LOG_FORMAT = "%(log_color)s[%(levelname)s] %(message)s"
LOG_COLORS = {
    "DEBUG":    "cyan",
    "INFO":     "green",
    "WARNING":  "yellow",
    "ERROR":    "red",
    "CRITICAL": "red,bg_white",
}


def setup_logger(debug_mode=False):
    level = logging.DEBUG if debug_mode else logging.INFO
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Reconfiguring only changes levels; the stdout handler is added once
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(ColoredFormatter(LOG_FORMAT, log_colors=LOG_COLORS))
        logger.addHandler(handler)

    for handler in logger.handlers:
        handler.setLevel(level)

    return logger


def is_debug_mode(mode) -> bool:
    return (mode or "").upper() == "DEBUG"


# Logger defaults to INFO until a run mode is known.
DEBUG_MODE = False
logger = setup_logger(debug_mode=DEBUG_MODE)


def configure_logger(mode):
    """
    Re-setup the package logger for the given run mode.

    Args:
        mode: Run mode string; "DEBUG" (any case) enables debug output.
    """
    global logger, DEBUG_MODE
    DEBUG_MODE = is_debug_mode(mode)
    logger = setup_logger(debug_mode=DEBUG_MODE)
    if DEBUG_MODE:
        logger.debug("Debug mode is active.")
    return logger
