"""
Centralized logging configuration for passbridge.

Provides:
- Console logging with colored, prefixed output by application area
- File logging with timestamps for post-mortem analysis
- Redaction of session tokens and other registered secrets
- Easy-to-use logger factory for different components
"""

import logging
import re
import sys
import threading
from datetime import datetime
from pathlib import Path
from typing import Optional

# ANSI color codes for console output
class Colors:
    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    MAGENTA = "\033[35m"
    CYAN = "\033[36m"
    WHITE = "\033[37m"

    BRIGHT_RED = "\033[91m"
    BRIGHT_GREEN = "\033[92m"
    BRIGHT_YELLOW = "\033[93m"
    BRIGHT_CYAN = "\033[96m"


# Area-specific colors and prefixes
AREA_CONFIG = {
    "main": {"color": Colors.BRIGHT_CYAN, "prefix": "PASSBRIDGE.main"},
    "api": {"color": Colors.BRIGHT_GREEN, "prefix": "PASSBRIDGE.api"},
    "api.vault": {"color": Colors.GREEN, "prefix": "PASSBRIDGE.api.vault"},
    "vault": {"color": Colors.MAGENTA, "prefix": "PASSBRIDGE.vault"},
    "vault.fetcher": {"color": Colors.MAGENTA, "prefix": "PASSBRIDGE.vault.fetcher"},
    "vault.triggers": {"color": Colors.MAGENTA, "prefix": "PASSBRIDGE.vault.triggers"},
    "clipboard": {"color": Colors.BRIGHT_YELLOW, "prefix": "PASSBRIDGE.clipboard"},
    "notices": {"color": Colors.CYAN, "prefix": "PASSBRIDGE.notices"},
    "config": {"color": Colors.BLUE, "prefix": "PASSBRIDGE.config"},
}

# Default for unknown areas
DEFAULT_AREA_CONFIG = {"color": Colors.WHITE, "prefix": "PASSBRIDGE"}

REDACTED = "********"

# `--session <token>` as it appears in a rendered argv
_SESSION_ARG_RE = re.compile(r"(--session[ =]+)(\S+)")

_secrets_lock = threading.Lock()
_registered_secrets: set[str] = set()


def register_secret(value: str) -> None:
    """Mask `value` in every subsequent log record."""
    if not value:
        return
    with _secrets_lock:
        _registered_secrets.add(value)


def forget_secret(value: str) -> None:
    with _secrets_lock:
        _registered_secrets.discard(value)


def redact(text: str) -> str:
    """Mask session arguments and registered secrets in `text`."""
    text = _SESSION_ARG_RE.sub(lambda m: m.group(1) + REDACTED, text)
    with _secrets_lock:
        secrets = sorted(_registered_secrets, key=len, reverse=True)
    for secret in secrets:
        text = text.replace(secret, REDACTED)
    return text


class RedactingFilter(logging.Filter):
    """Rewrites the record message so secrets never reach a handler."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        cleaned = redact(message)
        if cleaned != message:
            record.msg = cleaned
            record.args = None
        return True


class ColoredConsoleFormatter(logging.Formatter):
    """Custom formatter that adds colors and area prefixes to console output."""

    LEVEL_COLORS = {
        logging.DEBUG: Colors.DIM,
        logging.INFO: Colors.RESET,
        logging.WARNING: Colors.YELLOW,
        logging.ERROR: Colors.RED,
        logging.CRITICAL: Colors.BRIGHT_RED + Colors.BOLD,
    }

    def __init__(self, area: str = "main"):
        super().__init__()
        config = AREA_CONFIG.get(area, DEFAULT_AREA_CONFIG)
        self.area_color = config["color"]
        self.area_prefix = config["prefix"]

    def format(self, record: logging.LogRecord) -> str:
        level_color = self.LEVEL_COLORS.get(record.levelno, Colors.RESET)
        timestamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")

        # Format: [PASSBRIDGE.area] HH:MM:SS LEVEL: message
        prefix = f"{self.area_color}[{self.area_prefix}]{Colors.RESET}"
        time_str = f"{Colors.DIM}{timestamp}{Colors.RESET}"
        level_str = f"{level_color}{record.levelname:<8}{Colors.RESET}"

        return f"{prefix} {time_str} {level_str} {record.getMessage()}"


class FileFormatter(logging.Formatter):
    """Formatter for file output with full timestamps and structured format."""

    def __init__(self, area: str = "main"):
        super().__init__()
        config = AREA_CONFIG.get(area, DEFAULT_AREA_CONFIG)
        self.area_prefix = config["prefix"]

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]

        extra = ""
        if hasattr(record, "source"):
            extra += f" source={record.source}"
        if hasattr(record, "property"):
            extra += f" property={record.property}"

        # Format: TIMESTAMP [AREA] LEVEL: message (extra)
        return f"{timestamp} [{self.area_prefix}] {record.levelname}: {record.getMessage()}{extra}"


# File handler shared by loggers created after setup_logging
_file_handler: Optional[logging.FileHandler] = None


def setup_logging(
    log_dir: Optional[str] = None,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Initialize file logging.

    Args:
        log_dir: Directory for log files. Defaults to ~/.passbridge/logs
        file_level: Minimum level for file output

    Returns:
        Path to the log directory
    """
    global _file_handler

    directory = Path(log_dir) if log_dir else Path.home() / ".passbridge" / "logs"

    directory.mkdir(parents=True, exist_ok=True)

    log_filename = datetime.now().strftime("passbridge_%Y%m%d_%H%M%S.log")
    log_path = directory / log_filename

    # Also create/update a symlink to latest log
    latest_link = directory / "latest.log"
    try:
        if latest_link.is_symlink() or latest_link.exists():
            latest_link.unlink()
        latest_link.symlink_to(log_filename)
    except OSError:
        pass  # Symlinks may not work on all systems

    _file_handler = logging.FileHandler(log_path, encoding="utf-8")
    _file_handler.setLevel(file_level)
    _file_handler.setFormatter(FileFormatter("main"))
    _file_handler.addFilter(RedactingFilter())

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()
    root_logger.addHandler(_file_handler)

    # Loggers created before setup_logging also write to the file
    for name, existing in list(logging.Logger.manager.loggerDict.items()):
        if name.startswith("passbridge.") and isinstance(existing, logging.Logger):
            area = name[len("passbridge."):]
            area_file_handler = logging.FileHandler(log_path, encoding="utf-8")
            area_file_handler.setLevel(file_level)
            area_file_handler.setFormatter(FileFormatter(area))
            existing.addHandler(area_file_handler)

    root_logger.info(f"Logging initialized. Log file: {log_path}")

    return directory


def get_logger(area: str = "main") -> logging.Logger:
    """
    Get a logger for a specific application area.

    Args:
        area: The application area (e.g., "vault", "api.vault", "clipboard")

    Returns:
        Configured logger instance

    Example:
        logger = get_logger("vault")
        logger.info("Vault unlocked")
        # Output: [PASSBRIDGE.vault] 14:32:15 INFO     Vault unlocked
    """
    logger = logging.getLogger(f"passbridge.{area}")

    # Only configure if not already done
    if not logger.handlers:
        logger.setLevel(logging.DEBUG)
        logger.addFilter(RedactingFilter())

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.INFO)
        console_handler.setFormatter(ColoredConsoleFormatter(area))
        logger.addHandler(console_handler)

        if _file_handler:
            area_file_handler = logging.FileHandler(
                _file_handler.baseFilename,
                encoding="utf-8"
            )
            area_file_handler.setLevel(logging.DEBUG)
            area_file_handler.setFormatter(FileFormatter(area))
            logger.addHandler(area_file_handler)

        # Don't propagate to root to avoid duplicate logs
        logger.propagate = False

    return logger
