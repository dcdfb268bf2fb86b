"""
Logging utilities for consistent logging across table generation.

This module provides a centralized logging setup to ensure consistent log
formatting, file output, and console output wherever tables are produced.

Usage
-----
>>> from apatables.logging_utils import setup_logging
>>> logger = setup_logging(output_dir / "tables.log")
>>> logger.info("Generating tables...")
"""

import logging
import os
import sys
from datetime import datetime
from pathlib import Path

from .constants import CONFIG


def _get_log_level_from_env():
    """
    Get logging level from APATABLES_LOG_LEVEL environment variable.

    Returns
    -------
    int
        logging.DEBUG, logging.INFO, logging.WARNING, or logging.ERROR
        Defaults to logging.INFO if not set or invalid

    Examples
    --------
    export APATABLES_LOG_LEVEL=DEBUG    # Dispatch details
    export APATABLES_LOG_LEVEL=INFO     # Normal operation (default)
    export APATABLES_LOG_LEVEL=WARNING  # Quiet mode
    """
    level_str = os.environ.get(CONFIG['LOG_LEVEL_ENV'], 'INFO').upper()
    level_map = {
        'DEBUG': logging.DEBUG,
        'INFO': logging.INFO,
        'WARNING': logging.WARNING,
        'ERROR': logging.ERROR,
    }
    return level_map.get(level_str, logging.INFO)


def setup_logging(log_file=None, level=None, console=True):
    """
    Set up logging with consistent formatting for file and console output.

    Parameters
    ----------
    log_file : str or Path, optional
        Path to log file. If None, only console logging is used.
    level : int, optional
        Logging level (e.g., logging.DEBUG, logging.INFO, logging.WARNING)
        If None, reads from APATABLES_LOG_LEVEL environment variable (default: INFO)
    console : bool, default=True
        Whether to also log to console (in addition to file)

    Returns
    -------
    logging.Logger
        Configured logger instance

    Notes
    -----
    - Log format: "YYYY-MM-DD HH:MM:SS - LEVEL - message"
    - Creates parent directories for log_file if they don't exist
    - Console output goes to stderr so that markup written to stdout stays clean
    - Logger name is set to 'apatables'
    """
    if level is None:
        level = _get_log_level_from_env()

    logger = logging.getLogger(CONFIG['LOGGER_NAME'])
    logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(
        '%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, mode='w')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    # Prevent propagation to root logger (avoids duplicate messages)
    logger.propagate = False

    return logger


def log_script_start(logger, script_path, config_dict=None):
    """
    Log the start of a table script with configuration information.

    Concise header at INFO level; the configuration dump is DEBUG only.
    """
    logger.info("=" * 80)
    logger.info(f"{Path(script_path).name}")
    logger.info("=" * 80)

    if config_dict is not None:
        logger.debug(f"Started: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
        logger.debug("-" * 80)
        logger.debug("Full configuration:")
        for key, value in config_dict.items():
            logger.debug(f"  {key}: {value}")
        logger.debug("-" * 80)


def log_script_end(logger):
    """Log the end of a table script."""
    logger.info("=" * 80)
    logger.info(f"Completed: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    logger.info("=" * 80)


__all__ = [
    'setup_logging',
    'log_script_start',
    'log_script_end',
]
