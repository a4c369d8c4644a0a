"""
Project logging.

Every named logger gets its own stream handler (and, unless LOG_TO_FILE is off,
a shared file handler writing to `logs/debug.log`) and does not propagate.
"""

import logging
from logging import Formatter, Handler, Logger
from pathlib import Path
from typing import Any

from src.main.config import config

LOG_FILE = Path(__file__).resolve().parents[1] / "logs" / "debug.log"

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
DETAILED_FORMAT = "%(asctime)s [%(levelname)s]|[%(process)d]| %(name)s: %(message)s"
PLAIN_FORMAT = "%(asctime)s [%(process)d]| %(message)s"


def _level(name: str, default: int) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else default


log_level = _level(config.app.LOG_LEVEL, logging.INFO)
file_log_level = _level(config.app.LOG_LEVEL_FILE, logging.WARNING)


def _with_format(handler: Handler, level: int, fmt: str) -> Handler:
    handler.setLevel(level)
    handler.setFormatter(Formatter(fmt, DATE_FORMAT))
    return handler


def build_handlers(plain_format: bool) -> list[Handler]:
    if plain_format:
        return [_with_format(logging.StreamHandler(), log_level, PLAIN_FORMAT)]

    handlers = [_with_format(logging.StreamHandler(), log_level, DETAILED_FORMAT)]
    if config.app.LOG_TO_FILE:
        LOG_FILE.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(LOG_FILE, "a", "utf-8")
        handlers.append(_with_format(file_handler, file_log_level, DETAILED_FORMAT))
    return handlers


def get_logger(name: Any, *, plain_format: bool = False) -> Logger:
    """
    Named logger with the project handlers attached on first use.

    `plain_format` drops level and logger name; it is used for per-request
    lines such as timings and error responses.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        logger.setLevel(log_level)
        for handler in build_handlers(plain_format):
            logger.addHandler(handler)
        logger.propagate = False
    return logger
