"""
Logging Configuration

Console and file logging for the Echo Chamber hosts. The engine modules
only call logging.getLogger(<name>); handlers are attached here, once, by
whichever host starts first.
"""

import logging
import os
from pathlib import Path
from typing import List, Optional

LOG_FILE = Path(os.getenv("ECHO_CHAMBER_LOG_FILE", "logs/echo-chamber.log"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_TAIL_LINES = 50

# Loggers used across the package
LOGGER_NAMES = (
    "echo_chamber",
    "sequence_analyzer",
    "pattern_detector",
    "analysis_store",
    "presets",
    "api_client",
)


def setup_logging(
    log_file: Optional[Path] = None,
    level: Optional[str] = None,
    console: bool = True,
) -> logging.Logger:
    """
    Attach console and file handlers to the package loggers.

    Safe to call more than once: loggers that already have handlers are
    left alone. A log file that cannot be opened degrades to console only.
    """
    log_path = Path(log_file) if log_file else LOG_FILE
    log_level = getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO)

    loggers = [logging.getLogger(name) for name in LOGGER_NAMES]
    for named in loggers:
        named.setLevel(log_level)
    unconfigured = [named for named in loggers if not named.handlers]
    if not unconfigured:
        return logging.getLogger("echo_chamber")

    formatter = logging.Formatter(LOG_FORMAT)
    handlers: List[logging.Handler] = []
    if console:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)
    except OSError:
        # PermissionError included; keep console logging only
        pass

    for named in unconfigured:
        for handler in handlers:
            named.addHandler(handler)

    return logging.getLogger("echo_chamber")


def read_log_tail(lines: int = DEFAULT_TAIL_LINES, log_file: Optional[Path] = None) -> List[str]:
    """Last `lines` lines of the log file."""
    log_path = Path(log_file) if log_file else LOG_FILE
    try:
        with open(log_path, encoding="utf-8") as f:
            content = f.read().splitlines()
    except OSError:
        return ["Log file not found or cannot be read"]
    if lines <= 0:
        return []
    return content[-lines:]


def clear_log(log_file: Optional[Path] = None) -> bool:
    """Truncate the log file. Returns False if it cannot be written."""
    log_path = Path(log_file) if log_file else LOG_FILE
    try:
        log_path.write_text("")
        return True
    except OSError as e:
        logging.getLogger("echo_chamber").error(f"Failed to clear log file: {e}")
        return False
