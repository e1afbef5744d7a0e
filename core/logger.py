# core/logger.py
"""
Logging setup for the interview agent.

All modules log under the ``interview_agent`` namespace; the level comes from
the LOG_LEVEL environment variable (default: INFO).
"""
import logging
import os
import sys

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
logger = logging.getLogger("interview_agent")
logger.setLevel(LOG_LEVEL)

if not logger.handlers:
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(LOG_LEVEL)
    console_handler.setFormatter(logging.Formatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    logger.addHandler(console_handler)

logger.propagate = False


def get_logger(name: str = None) -> logging.Logger:
    """Return the package logger, or a child of it when ``name`` is given."""
    if name:
        return logging.getLogger(f"interview_agent.{name}")
    return logger
