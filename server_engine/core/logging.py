# server_engine/core/logging.py

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

LOGGER_NAME = "ServerEngine"
LOG_DIR = "logs"

CONSOLE_FORMAT = '%(levelname)-8s [%(name)s] %(message)s'
FILE_FORMAT = '%(asctime)s - %(levelname)-8s [%(module)s:%(funcName)s:%(lineno)d] %(message)s'

_logger: Optional[logging.Logger] = None
_console: Optional[logging.Handler] = None


def _configure(name: str, log_dir: str) -> logging.Logger:
    """Console at INFO, one timestamped file per run at DEBUG."""
    global _console

    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)
    if logger.handlers:
        return logger

    _console = logging.StreamHandler(sys.stdout)
    _console.setLevel(logging.INFO)
    _console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(_console)

    path = Path(log_dir)
    path.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    file_handler = logging.FileHandler(path / f"server_{stamp}.log", delay=True)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
    logger.addHandler(file_handler)

    return logger


def get_logger() -> logging.Logger:
    """Shared server logger, configured on first use."""
    global _logger
    if _logger is None:
        _logger = _configure(LOGGER_NAME, LOG_DIR)
    return _logger


def set_console_level(level: str):
    """Apply server.log_level to the console handler."""
    get_logger()
    if _console is not None:
        _console.setLevel(getattr(logging, str(level).upper(), logging.INFO))
