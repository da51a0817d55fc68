"""
xartool Logger - Centralized Logging Utility
"""
import logging
import sys

def setup_logger():
    # Create a custom logger
    logger = logging.getLogger("xartool")
    logger.setLevel(logging.DEBUG)

    # Stdout carries the verification verdict, diagnostics go to stderr
    c_handler = logging.StreamHandler(sys.stderr)
    c_handler.setLevel(logging.INFO)

    c_format = logging.Formatter('%(levelname)s: %(message)s')
    c_handler.setFormatter(c_format)

    if not logger.handlers:
        logger.addHandler(c_handler)

    return logger


def set_verbosity(verbose: bool = False, quiet: bool = False):
    """Adjust the console handler level for CLI flags"""
    level = logging.INFO
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    for handler in logger.handlers:
        handler.setLevel(level)

# Initialize singleton
logger = setup_logger()

__all__ = ["logger", "set_verbosity"]
