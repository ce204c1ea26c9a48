"""Log utilities."""

import logging
import os

from rich.logging import RichHandler

import constants


def resolve_log_level() -> int:
    """Return the log level selected by the MOCKZURE_LOG_LEVEL variable.

    Unknown level names fall back to the default level.

    Returns:
        int: Numeric logging level.
    """
    name = os.environ.get(constants.LOG_LEVEL_ENV_VAR, constants.DEFAULT_LOG_LEVEL)
    level = logging.getLevelName(name.strip().upper())
    if isinstance(level, int):
        return level
    return logging.getLevelName(constants.DEFAULT_LOG_LEVEL)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger configured for Rich console output.

    The returned logger has its level taken from the environment, its
    handlers replaced with a single RichHandler for rich-formatted console
    output, and propagation to ancestor loggers disabled.

    Parameters:
        name (str): Name of the logger to retrieve or create.

    Returns:
        logging.Logger: The configured logger instance.
    """
    logger = logging.getLogger(name)
    logger.setLevel(resolve_log_level())
    logger.handlers = [RichHandler()]
    logger.propagate = False
    return logger


def set_log_level(level: int) -> None:
    """Change the level of the root logger and of every Rich console logger.

    Parameters:
        level (int): New numeric logging level.
    """
    logging.getLogger().setLevel(level)
    for logger in logging.root.manager.loggerDict.values():
        if isinstance(logger, logging.Logger) and not logger.propagate:
            logger.setLevel(level)
