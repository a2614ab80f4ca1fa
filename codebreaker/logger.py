import logging

from .config import LOG_LEVEL

LOGGER_NAME = "codebreaker"


def setup_logger(level: str = LOG_LEVEL) -> logging.Logger:
    """Attach one console handler to the package logger (safe to call twice)."""
    formatter = logging.Formatter(
        "%(asctime)s - %(levelname)s - %(name)s - %(module)s - %(message)s"
    )

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.setLevel(level)

    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers = []
    logger.addHandler(console_handler)
    logger.setLevel(level)
    logger.propagate = False

    logger.info("codebreaker logger initialized")
    return logger
