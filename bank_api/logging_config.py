"""
Logging configuration for the bank API.

Console-only: the process is expected to run under a supervisor that
collects stderr.
"""

import logging

SERVICE_LOGGER = "bank_api"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level_name: str = "INFO") -> None:
    """
    Configure root + service loggers for the bank API.
    """
    level = getattr(logging, level_name.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    service_logger = logging.getLogger(SERVICE_LOGGER)
    service_logger.setLevel(level)
    # Avoid duplicate handlers if setup_logging is called multiple times
    service_logger.handlers = []

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    service_logger.addHandler(console_handler)

    # psycopg_pool logs every connection attempt at INFO
    logging.getLogger("psycopg.pool").setLevel(max(level, logging.WARNING))


def get_logger(name: str) -> logging.Logger:
    """
    Convenience wrapper to get a named logger.
    """
    return logging.getLogger(name)
