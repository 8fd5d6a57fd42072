"""
Logging setup for command-line use.

Library modules only create loggers; handlers are installed here, once.
"""

import logging
import os
from typing import Optional

from rich.logging import RichHandler

_DEF_LEVEL = "WARNING"


def setup_logging(level: Optional[str] = None) -> None:
    """Install a RichHandler on the root logger.

    Args:
        level: Level name; falls back to LOG_LEVEL, then WARNING
    """
    lvl_name = (level or os.getenv("LOG_LEVEL") or _DEF_LEVEL).upper()
    lvl = getattr(logging, lvl_name, logging.WARNING)
    logging.basicConfig(
        level=lvl,
        format="%(message)s",
        datefmt="%H:%M:%S",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )
