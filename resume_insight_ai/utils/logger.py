"""Package loggers: every module writes through one stdout handler at LOG_LEVEL."""

import logging
import sys
from typing import Optional, Union

from resume_insight_ai.config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s:%(lineno)d | %(message)s"
DATE_FORMAT = "%H:%M:%S"

_handler: Optional[logging.Handler] = None


def _shared_handler() -> logging.Handler:
    global _handler
    if _handler is None:
        _handler = logging.StreamHandler(sys.stdout)
        _handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    return _handler


def get_logger(name: str, level: Optional[Union[int, str]] = None) -> logging.Logger:
    """
    Logger for ``name``. Records still propagate, so the host app (Streamlit, pytest)
    sees them too; ``level`` overrides LOG_LEVEL for this logger only.
    """
    logger = logging.getLogger(name)
    handler = _shared_handler()
    if handler not in logger.handlers:
        logger.addHandler(handler)
    logger.setLevel(level if level is not None else LOG_LEVEL)
    return logger
