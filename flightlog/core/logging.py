# flightlog/core/logging.py
import logging

LOG_FORMAT = "%(asctime)s %(levelname)s: %(message)s"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """
    Configure the console logger shared by the whole app.

    Safe to call more than once: a second call only updates the level.
    """
    log_level = getattr(logging, str(level).upper(), logging.INFO)

    logger = logging.getLogger("flightlog")
    logger.setLevel(log_level)
    if not any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    for handler in logger.handlers:
        handler.setLevel(log_level)

    logger.info("Logging configured (level %s)", logging.getLevelName(log_level))
    return logger
