import logging
import os
import sys

ROOT_LOGGER = "rss_notion"


def _level_from_env() -> int:
    level_name = os.getenv("LOG_LEVEL", "INFO").upper()
    return getattr(logging, level_name, logging.INFO)


def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    logger.setLevel(_level_from_env())
    handler = logging.StreamHandler(sys.stdout)
    formatter = logging.Formatter(
        "[%(asctime)s] [%(levelname)s] %(threadName)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    return logger


def refresh_log_level() -> None:
    """Re-apply LOG_LEVEL to loggers made by get_logger (e.g. after load_dotenv)."""
    level = _level_from_env()
    for name, logger in list(logging.root.manager.loggerDict.items()):
        if name.split(".")[0] != ROOT_LOGGER or not isinstance(logger, logging.Logger):
            continue
        if logger.handlers:
            logger.setLevel(level)
