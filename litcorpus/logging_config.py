"""
Logging setup for litcorpus.

All modules log through loguru's shared ``logger``; this module only
decides where the records go.
"""

import sys
from pathlib import Path
from typing import Optional, Union

from loguru import logger

DEFAULT_LEVEL = "INFO"
DEFAULT_ROTATION = "10 MB"
DEFAULT_RETENTION = "10 days"
DEFAULT_FORMAT = ("{time:YYYY-MM-DD HH:mm:ss} | {level} | "
                  "{name}:{function}:{line} | {message}")


def setup_logging(
    level: str = DEFAULT_LEVEL,
    log_file: Optional[Union[str, Path]] = None,
    rotation: str = DEFAULT_ROTATION,
    retention: str = DEFAULT_RETENTION
) -> None:
    """
    Replace loguru's default sink with the package's sinks.

    Args:
        level: Minimum level for every sink
        log_file: Optional path of a rotating log file
        rotation: File rotation policy (loguru syntax)
        retention: How long rotated files are kept
    """
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format=DEFAULT_FORMAT)

    if log_file is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_path,
            level=level.upper(),
            format=DEFAULT_FORMAT,
            rotation=rotation,
            retention=retention,
            encoding="utf-8"
        )

    logger.debug(f"Logging configured at level {level.upper()}")
