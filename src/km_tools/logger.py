# km_tools/logger.py
"""
Logging functionality for km-tools.

Everything written through the logger goes to stderr (and optionally a log
file) so that stdout stays reserved for the filtered matrix.
"""

import os
import sys
import logging

LOGGER_NAME = 'km_tools'

# End-of-run summaries sit above CRITICAL so that --log-level never hides them
SUMMARY = logging.CRITICAL + 10
logging.addLevelName(SUMMARY, 'SUMMARY')

def setup_logger(log_file=None, log_level=logging.INFO):
    """
    Setup logger for km-tools.

    Args:
        log_file: Path to log file (optional)
        log_level: Logging level (default: INFO)

    Returns:
        Logger instance
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(log_level)

    # Remove any existing handlers to avoid duplication
    if logger.handlers:
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()

    # Console handler writes to stderr, never stdout
    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(log_level)

    formatter = logging.Formatter('%(asctime)s - %(levelname)s - %(message)s')
    ch.setFormatter(formatter)
    logger.addHandler(ch)

    # Add file handler if log file is specified
    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir, exist_ok=True)

        fh = logging.FileHandler(log_file)
        fh.setLevel(log_level)
        fh.setFormatter(formatter)
        logger.addHandler(fh)

    return logger
