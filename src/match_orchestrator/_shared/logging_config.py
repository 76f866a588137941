# Area: Shared
"""
match_orchestrator._shared.logging_config — Structured logging setup
====================================================================

Configures dual logging: terminal (colored) + file (JSON lines).
Provides helpers for logging domain rejections and unexpected failures
raised while serving a request.
"""

from __future__ import annotations
import logging
import json
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Union

if TYPE_CHECKING:
    from ..errors import MatchOrchestratorError

# Package logger
logger = logging.getLogger("match_orchestrator")

LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


class TerminalFormatter(logging.Formatter):
    """Colored formatter for terminal output."""

    COLORS = {
        "DEBUG": "\033[36m",     # Cyan
        "INFO": "\033[32m",      # Green
        "WARNING": "\033[33m",   # Yellow
        "ERROR": "\033[31m",     # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.RESET)
        original = record.levelname
        record.levelname = f"{color}{record.levelname}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = original


class JSONFormatter(logging.Formatter):
    """JSON formatter for file output."""

    # Extra attributes copied into the JSON record when present
    EXTRA_FIELDS = ("error_code", "room_id", "ticket_id", "event_type", "status_code")

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for name in self.EXTRA_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                log_data[name] = value
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data)


def resolve_level(level: Union[int, str]) -> int:
    """Translate a level name (case-insensitive) or number to a logging level."""
    if isinstance(level, int):
        return level
    try:
        return LOG_LEVELS[level.upper()]
    except KeyError:
        raise ValueError(f"Unknown log level: {level!r}") from None


def setup_logging(
    log_file_path: Optional[str] = "match_orchestrator.log",
    level: Union[int, str] = logging.INFO,
) -> None:
    """
    Configure logging for the package.

    Parameters
    ----------
    log_file_path : str or None
        Path to the log file. ``None`` disables the file handler.
    level : int or str
        Logging level. Defaults to INFO.
    """
    numeric_level = resolve_level(level)

    pkg_logger = logging.getLogger("match_orchestrator")
    pkg_logger.setLevel(numeric_level)

    # Remove existing handlers
    pkg_logger.handlers.clear()

    # Terminal handler with colors
    terminal_handler = logging.StreamHandler(sys.stdout)
    terminal_handler.setLevel(numeric_level)
    terminal_handler.setFormatter(TerminalFormatter(
        fmt="%(asctime)s │ %(levelname)s │ %(name)s │ %(message)s",
        datefmt="%H:%M:%S",
    ))
    pkg_logger.addHandler(terminal_handler)

    # File handler with JSON
    if log_file_path:
        try:
            log_path = Path(log_file_path)
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_path, encoding="utf-8")
            file_handler.setLevel(numeric_level)
            file_handler.setFormatter(JSONFormatter())
            pkg_logger.addHandler(file_handler)
        except OSError as e:
            pkg_logger.warning(f"Could not create log file: {e}")

    # Prevent propagation to root logger
    pkg_logger.propagate = False


def log_domain_error(error: "MatchOrchestratorError", path: str = "") -> None:
    """
    Log a rejected request.

    Domain rejections are expected traffic, so they go out at WARNING
    without a traceback.
    """
    logger.warning(
        f"Rejected {path or 'request'}: {error.code} ({error})",
        extra={"error_code": error.code, "status_code": error.http_status},
    )


def log_unexpected_error(error: BaseException, path: str = "") -> None:
    """Log an unhandled exception with its traceback."""
    logger.error(
        f"Unhandled error on {path or 'request'}: {error.__class__.__name__}",
        exc_info=(type(error), error, error.__traceback__),
        extra={"error_code": "internal_error", "status_code": 500},
    )
