"""
Logging Utilities Module
-----------------------
Provides helpers for setting up and managing logging.
"""
import logging

from tqdm import tqdm

LOGGER_NAME = 'factscorer'
LOG_FORMAT = '%(asctime)s - %(levelname)s - %(name)s - %(message)s'


def get_logger() -> logging.Logger:
    """Returns the package logger without touching its handlers or level."""
    return logging.getLogger(LOGGER_NAME)


def setup_logging(log_level: str = 'INFO') -> logging.Logger:
    """
    Sets up and returns the package logger with the specified log level.
    Calling it again only changes the level; no second handler is added.
    """
    logger = get_logger()
    logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    logger.info("LoggingUtils: Logger setup complete.")
    return logger


def log_progress_bar(logger, total_steps, desc="Scoring"):
    """
    Logs a progress bar using tqdm, writing progress to the logger.
    Returns (update, close) functions.
    """
    bar = tqdm(total=total_steps, desc=desc, ncols=70, bar_format='{l_bar}{bar}| {n_fmt}/{total_fmt} [{elapsed}<{remaining}]', leave=False)
    def update(step=1):
        bar.update(step)
        logger.info(bar.format_meter(**bar.format_dict))
    def close():
        bar.close()
    return update, close
