# fair_assignment/logger.py
import logging
import sys

from .config import LOGGER_NAME, LOG_LEVEL, LOG_FORMAT

logger = logging.getLogger(LOGGER_NAME)
logger.setLevel(LOG_LEVEL)

# Prevent duplicate handlers if imported multiple times
if not logger.handlers:
    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(stream_handler)
