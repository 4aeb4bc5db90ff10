"""
Logging setup for tidyroot.

Two loguru sinks: a coloured console stream and the append-only control
log inside the watched root, one ``[<ISO8601>] <message>`` line per event.
"""

import sys
from pathlib import Path

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)
CONTROL_LOG_FORMAT = "[{time:YYYY-MM-DDTHH:mm:ss.SSS[Z]!UTC}] {message}"


def configure_logging(root: Path, log_file: str = "runtime.log", level: str = "INFO") -> Path:
    """
    Replace loguru's default sink with the service sinks.

    Args:
        root: Watched root directory holding the control log
        log_file: Control log file name
        level: Minimum level for both sinks

    Returns:
        Path of the control log file
    """
    log_path = Path(root) / log_file

    logger.remove()
    logger.add(sys.stdout, format=CONSOLE_FORMAT, level=level)
    logger.add(
        str(log_path),
        format=CONTROL_LOG_FORMAT,
        level=level,
        mode="a",
        encoding="utf-8",
    )

    return log_path
