"""
Logger setup for lesson checks.

Console output always; a rotating log file when requested. Every handler
gets a filter that masks Upstage keys and bearer tokens.
"""

import logging
import re
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional


def mask_api_key(api_key: str) -> str:
    """
    Mask an API key for safe logging, keeping a short prefix.

    Examples:
        >>> mask_api_key("up_abcdef123456")
        'up_a********'
        >>> mask_api_key("")
        '********'
    """
    if not api_key or len(api_key) < 8:
        return "********"
    return api_key[:4] + "********"


class SensitiveDataFilter(logging.Filter):
    """
    Logging filter that masks credentials in log messages.

    Catches ``Authorization: Bearer <token>`` headers and
    ``api_key=<value>`` style assignments.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        record.msg = re.sub(
            r'(bearer)\s+[A-Za-z0-9._\-]+',
            r'\1 ********',
            str(record.msg),
            flags=re.IGNORECASE
        )

        record.msg = re.sub(
            r'(api[_-]?key|token|secret)["\']?\s*[:=]\s*["\']?([^"\'\s,]+)',
            r'\1: ********',
            str(record.msg),
            flags=re.IGNORECASE
        )

        return True


def setup_logger(
    name: str = "lesson_audit",
    level: int = logging.INFO,
    log_file: Optional[str] = None
) -> logging.Logger:
    """
    Attach console (and optional file) handlers to a named logger.

    Args:
        name: Logger name (default: "lesson_audit", the package root, so
            module loggers under it share the handlers)
        level: Logging level (default: logging.INFO)
        log_file: Optional path to log file for file output

    Returns:
        The named logger

    Examples:
        >>> logger = setup_logger(level=logging.DEBUG, log_file="output/logs/check.log")
        >>> logger.info("Lesson check started")
    """
    logger = logging.getLogger(name)

    # Already configured by an earlier call
    if logger.handlers:
        logger.setLevel(level)
        return logger

    logger.setLevel(level)

    formatter = logging.Formatter(
        fmt='%(asctime)s [%(levelname)s] %(name)s:%(funcName)s:%(lineno)d %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    sensitive_filter = SensitiveDataFilter()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.addFilter(sensitive_filter)
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
            encoding='utf-8'
        )
        file_handler.setFormatter(formatter)
        file_handler.addFilter(sensitive_filter)
        logger.addHandler(file_handler)

    return logger
