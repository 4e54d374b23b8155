"""
Logging configuration for hashcode-upload.

Every module asks for its own named logger; the command line configures
the root handler once.
"""

import logging
import sys

base_format = "%(asctime)s.%(msecs)03d | %(levelname)-8s | %(name)s - %(message)s"
date_format = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str = "INFO") -> None:
    """
    Setup logging to stderr, replacing any previously installed handlers.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    # Remove existing handlers to avoid duplicates
    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(logging.Formatter(base_format, datefmt=date_format))
    logging.root.addHandler(console_handler)
    logging.root.setLevel(getattr(logging, level.upper()))


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
