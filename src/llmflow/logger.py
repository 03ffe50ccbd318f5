import datetime
import logging

from llmflow import config

default_level = config.LOGGING_LEVEL

logging.basicConfig(
    level=getattr(logging, default_level, logging.INFO),
    format="%(asctime)s [%(levelname)s] [%(name)s.%(funcName)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

logger = logging.getLogger("llmflow")

# Shortcut aliases
debug = logger.debug
info = logger.info
warning = logger.warning
error = logger.error
exception = logger.exception

_VALID_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def get_logger():
    normalized_level = default_level.upper()
    if normalized_level in _VALID_LEVELS:
        logger.setLevel(getattr(logging, normalized_level))
    else:
        logging.getLogger().warning(
            f"Invalid logging level: {default_level}. Level not changed."
        )
    return logger


def format_timestamp(ms: int) -> str:
    dt = datetime.datetime.fromtimestamp(ms / 1000, tz=datetime.timezone.utc)
    return dt.strftime("%Y-%m-%d %H:%M:%S")


def set_logging_level(level: str):
    normalized_level = level.upper()
    if normalized_level not in _VALID_LEVELS:
        logging.getLogger().warning(
            f"Invalid logging level: {level}. Level not changed."
        )
        return
    new_level = getattr(logging, normalized_level)
    logger.setLevel(new_level)
    logger.info(f"Logging level changed to: {normalized_level}")
