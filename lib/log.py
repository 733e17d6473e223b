"""Logging setup for the console.

The terminal belongs to the TUI while it runs, so log records go to a file
instead of stderr.  Override the location with GONNECTIAN_LOG_FILE and the
threshold with GONNECTIAN_LOG_LEVEL.
"""

import logging
import os
import sys
from pathlib import Path
from typing import Optional

from rich.console import Console

_DEFAULT_LOG_FILE = Path.home() / ".local" / "share" / "gonnectian-console" / "console.log"
_FORMAT = "%(asctime)s %(name)s - [%(levelname)s] - %(message)s"

logger = logging.getLogger("gonnectian")

err_console = Console(stderr=True, highlight=False)


def default_log_file() -> str:
    return os.environ.get("GONNECTIAN_LOG_FILE", str(_DEFAULT_LOG_FILE))


def default_log_level() -> str:
    return os.environ.get("GONNECTIAN_LOG_LEVEL", "INFO").upper()


def configure_logging(log_file: Optional[str] = None, level: Optional[str] = None) -> None:
    """Send all log records to *log_file*, creating its directory if needed."""
    path = Path(log_file or default_log_file())
    path.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=(level or default_log_level()).upper(),
        format=_FORMAT,
        handlers=[logging.FileHandler(path, encoding="utf-8")],
        force=True,
    )


def fatal(message: str) -> None:
    """Log *message* as critical, echo it on stderr and exit with status 1."""
    logger.critical(message)
    err_console.print(message, markup=False, soft_wrap=True)
    sys.exit(1)
