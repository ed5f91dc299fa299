"""
Logging setup for the graph loader.

Uses Loguru. Every log line carries the ``component`` that emitted it; bind
one with ``get_logger``. Console output goes to stderr so that stdout stays
free for streamed rows.
"""

import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level:<8}</level> | "
    "<cyan>{extra[component]}</cyan> | "
    "<level>{message}</level>"
)

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level:<8} | {extra[component]} | {message}"

DEFAULT_COMPONENT = "loader"

# No handlers until setup_logging runs; library use stays silent
logger.configure(handlers=[], extra={"component": DEFAULT_COMPONENT})


def setup_logging(
    log_dir: Optional[Path] = None,
    level: str = "INFO",
    log_format: Optional[str] = None,
    console: bool = True,
    file: bool = False,
) -> Optional[Path]:
    """
    Replace all log handlers with the requested ones.

    Safe to call more than once: the CLI configures a console handler first
    and reconfigures once the configuration file has been read.

    Args:
        log_dir: Directory for log files. Required when ``file`` is set.
        level: Minimum level (DEBUG, INFO, WARNING, ERROR).
        log_format: Console format; defaults to CONSOLE_FORMAT.
        console: Log to stderr.
        file: Log to a rotating ``loader_<timestamp>.log`` file in ``log_dir``.

    Returns:
        The log file path, or None when file logging is off.
    """
    if file and log_dir is None:
        raise ValueError("log_dir is required when file logging is enabled")

    handlers: List[Dict[str, Any]] = []
    if console:
        handlers.append({
            "sink": sys.stderr,
            "format": log_format or CONSOLE_FORMAT,
            "level": level,
            "colorize": True,
        })

    log_file = None
    if file:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / f"loader_{datetime.now():%Y-%m-%d_%H-%M-%S}.log"
        handlers.append({
            "sink": log_file,
            "format": FILE_FORMAT,
            "level": level,
            "rotation": "10 MB",
            "retention": "30 days",
            "compression": "gz",
        })

    logger.configure(handlers=handlers, extra={"component": DEFAULT_COMPONENT})
    if log_file:
        get_logger().info(f"Writing log file {log_file}")
    return log_file


def get_logger(component: str = DEFAULT_COMPONENT):
    """Logger whose lines are tagged with ``component``."""
    return logger.bind(component=component)
