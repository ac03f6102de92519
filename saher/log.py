"""
saher.log
=========

Centralised logging setup for the CLI and the API server.
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional

from .settings import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure the root logger.

    Args:
        level: Logging level name (defaults to ``settings.log_level``)
        log_file: Optional path of a rotating log file (defaults to ``settings.log_file``)

    Returns:
        Root logger instance
    """
    level = (level or settings.log_level).upper()
    log_file = log_file or settings.log_file

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(RotatingFileHandler(log_file, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8"))

    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)
    return logging.getLogger()
