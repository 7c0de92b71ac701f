"""Logging setup for command line runs."""

import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from loguru import logger

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} - {name} - {level} - {message}"


def setup_logging(debug: bool = False, log_dir: Optional[Union[str, Path]] = None) -> Optional[Path]:
    """
    Route log records to stderr and, optionally, a timestamped file.

    Args:
        debug: Log at DEBUG instead of INFO
        log_dir: Directory for a per-run log file

    Returns:
        Path of the log file, if one was created
    """
    level = "DEBUG" if debug else "INFO"
    logger.remove()
    logger.add(sys.stderr, level=level, format=LOG_FORMAT)

    if not log_dir:
        return None

    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"fraud_detector_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"
    logger.add(log_file, level=level, format=LOG_FORMAT)
    return log_file
