# backend/portfolio_dashboard/utils/logger.py
import logging
import os
import sys

ROOT_LOGGER_NAME = "Portfolio-Dashboard"


def setup_logger(name: str = ROOT_LOGGER_NAME):
    """Return a stdout logger; handlers are attached once per name."""
    logger = logging.getLogger(name)
    logger.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger
