import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

from app.core.logging import LOG_DIR, LOGGING_CONFIG


def setup_logger(name: str, log_file: Optional[str] = None, level: int = logging.INFO) -> logging.Logger:
    """Logger for a single feature area, optionally with its own rotating file under LOG_DIR.

    Records still propagate to the root handlers set up by setup_logging().
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    if logger.handlers:
        return logger

    formatter = logging.Formatter(LOGGING_CONFIG["formatters"]["default"]["format"])

    if not logging.getLogger().handlers:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_file:
        file_config = LOGGING_CONFIG["handlers"]["file"]
        LOG_DIR.mkdir(exist_ok=True)
        file_handler = RotatingFileHandler(
            LOG_DIR / log_file,
            maxBytes=file_config["maxBytes"],
            backupCount=file_config["backupCount"]
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
