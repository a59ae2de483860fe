"""
Log formatting for the sheet report CLI.

Adds short ASCII service prefixes and optional ANSI level colors to console
output, and an optional file handler configured from the environment.
"""

import logging
import os
from typing import Optional

from core.config import get_log_file


class EnhancedLogFormatter(logging.Formatter):
    """Formatter that prefixes each record with its service, e.g. [SHEETS]."""

    SERVICE_PREFIXES = {
        "gsheets": "[SHEETS]",
        "gdrive": "[DRIVE]",
        "gmail": "[GMAIL]",
        "auth": "[AUTH]",
        "core": "[CORE]",
        "main": "[MAIN]",
        "__main__": "[MAIN]",
    }

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool = True):
        super().__init__()
        self.use_colors = use_colors

    def _get_ascii_prefix(self, logger_name: str, level_name: str) -> str:
        root_name = logger_name.split(".", 1)[0]
        prefix = self.SERVICE_PREFIXES.get(root_name, f"[{root_name.upper()}]")
        if level_name in ("WARNING", "ERROR", "CRITICAL"):
            prefix = f"{prefix} {level_name}:"
        return prefix

    def format(self, record: logging.LogRecord) -> str:
        prefix = self._get_ascii_prefix(record.name, record.levelname)
        if self.use_colors and record.levelname in self.COLORS:
            prefix = f"{self.COLORS[record.levelname]}{prefix}{self.RESET}"
        message = f"{prefix} {record.getMessage()}"
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return message


def configure_file_logging(log_file: Optional[str] = None) -> Optional[str]:
    """
    Attach a detailed file handler to the root logger.

    Uses SHEET_REPORT_LOG_FILE when no path is given. Returns the path
    used, or None when file logging is disabled.
    """
    path = log_file or get_log_file()
    if not path:
        return None

    path = os.path.expanduser(path)
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    root_logger = logging.getLogger()
    for handler in root_logger.handlers:
        if isinstance(handler, logging.FileHandler) and handler.baseFilename == os.path.abspath(path):
            return path

    file_handler = logging.FileHandler(path, mode="a", encoding="utf-8")
    file_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - [%(module)s.%(funcName)s:%(lineno)d] - %(message)s"
        )
    )
    root_logger.addHandler(file_handler)
    logging.getLogger(__name__).debug(f"Detailed file logging configured to: {path}")
    return path
