"""
Logger Utility
==============

Logging for the assistant:

1. Log levels (DEBUG, INFO, WARNING, ERROR)
2. Timestamps and context prefixes
3. Child loggers for nested contexts
4. Color-coded terminal output
5. An optional plain-text debug file for tracing tool calls

The minimum level comes from LOG_LEVEL and can be changed at runtime with
set_level() (the CLI does this for --log-level). When DEBUG=1 every record,
whatever its level, is also appended to DEBUG_LOG_FILE without colors, so
tool traffic can be inspected without cluttering the terminal.

Usage:
    from gpt_agent.utils.logger import Logger

    weather_logger = Logger("Weather")
    weather_logger.debug("Geocoding location", {"location": "Paris"})
"""

import json
import os
import sys
from datetime import datetime
from enum import IntEnum
from pathlib import Path
from typing import Any


class LogLevel(IntEnum):
    """
    Log levels with numeric values for comparison.
    Higher values = more severe = always shown.
    """
    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40


class Colors:
    """ANSI escape codes for colored terminal output."""
    RESET = "\033[0m"
    DEBUG = "\033[36m"    # Cyan
    INFO = "\033[32m"     # Green
    WARNING = "\033[33m"  # Yellow
    ERROR = "\033[31m"    # Red
    DIM = "\033[2m"       # Dimmed text


_LEVEL_NAMES = {
    "DEBUG": LogLevel.DEBUG,
    "INFO": LogLevel.INFO,
    "WARNING": LogLevel.WARNING,
    "WARN": LogLevel.WARNING,
    "ERROR": LogLevel.ERROR,
    "CRITICAL": LogLevel.ERROR,
}


def parse_level(level_str: str) -> LogLevel:
    """Map a level name (any case) to a LogLevel, defaulting to INFO."""
    return _LEVEL_NAMES.get(level_str.upper(), LogLevel.INFO)


def _debug_file_from_env() -> Path | None:
    if os.getenv("DEBUG", "").lower() not in ("1", "true"):
        return None
    return Path(os.getenv("DEBUG_LOG_FILE", "debug.log"))


# Process-wide settings shared by every Logger instance
_min_level: LogLevel = parse_level(os.getenv("LOG_LEVEL", "INFO"))
_debug_file: Path | None = _debug_file_from_env()


def set_level(level: str | LogLevel) -> None:
    """Set the minimum terminal log level for all loggers."""
    global _min_level
    _min_level = level if isinstance(level, LogLevel) else parse_level(level)


def set_debug_file(path: Path | None) -> None:
    """Enable (path) or disable (None) the debug log file."""
    global _debug_file
    _debug_file = path


class Logger:
    """
    A context-aware logger with colored output.

    Example:
        logger = Logger("Bridge")
        logger.info("Starting round")

        child = logger.child("Executor")
        child.debug("Dispatching", {"tool": "check_weather"})
    """

    def __init__(self, context: str = ""):
        """
        Initialize a logger with an optional context.

        Args:
            context: A string prefix for all log messages (e.g., "Bridge", "Weather")
        """
        self.context = context

    def child(self, child_context: str) -> "Logger":
        """
        Create a child logger with additional context.

        Args:
            child_context: Additional context to append

        Returns:
            A new Logger with combined context, e.g. [Tools:Weather]
        """
        new_context = f"{self.context}:{child_context}" if self.context else child_context
        return Logger(new_context)

    def _format_message(self, level: str, message: str, color: str) -> str:
        """
        Format a log message with timestamp, level, and context.

        Output format: [TIMESTAMP] [LEVEL] [context] message
        """
        timestamp = datetime.now().isoformat(timespec="seconds")
        context_str = f"[{self.context}] " if self.context else ""

        return (
            f"{Colors.DIM}[{timestamp}]{Colors.RESET} "
            f"{color}[{level}]{Colors.RESET} "
            f"{context_str}{message}"
        )

    def _write_debug_file(
        self,
        level_name: str,
        message: str,
        data: dict[str, Any] | None
    ) -> None:
        if _debug_file is None:
            return
        timestamp = datetime.now().isoformat()
        context_str = f"[{self.context}] " if self.context else ""
        line = f"[{timestamp}] [{level_name}] {context_str}{message}"
        if data:
            line += " " + json.dumps(data, indent=2, default=str)
        try:
            with _debug_file.open("a", encoding="utf-8") as f:
                f.write(line + "\n")
        except OSError as e:
            print(f"Warning: could not write debug log {_debug_file}: {e}", file=sys.stderr)

    def _log(
        self,
        level: LogLevel,
        level_name: str,
        color: str,
        message: str,
        data: dict[str, Any] | None = None
    ) -> None:
        """
        Internal logging method.

        Args:
            level: The log level for filtering
            level_name: Display name of the level
            color: ANSI color code for the level
            message: The log message
            data: Optional structured data to include
        """
        self._write_debug_file(level_name, message, data)

        if level < _min_level:
            return

        formatted = self._format_message(level_name, message, color)

        # Errors go to stderr so they survive stdout redirection
        stream = sys.stderr if level >= LogLevel.ERROR else sys.stdout
        print(formatted, file=stream)

        if data:
            data_str = json.dumps(data, indent=2, default=str)
            print(f"{Colors.DIM}{data_str}{Colors.RESET}", file=stream)

    def debug(self, message: str, data: dict[str, Any] | None = None) -> None:
        """Log a debug message. Only shown on the terminal when LOG_LEVEL=DEBUG."""
        self._log(LogLevel.DEBUG, "DEBUG", Colors.DEBUG, message, data)

    def info(self, message: str, data: dict[str, Any] | None = None) -> None:
        """Log an info message."""
        self._log(LogLevel.INFO, "INFO", Colors.INFO, message, data)

    def warning(self, message: str, data: dict[str, Any] | None = None) -> None:
        """
        Log a warning message.

        Warnings are for problems that don't stop the turn, such as a
        failed tool call that is handed back to the model.
        """
        self._log(LogLevel.WARNING, "WARN", Colors.WARNING, message, data)

    def error(self, message: str, error: Exception | None = None) -> None:
        """
        Log an error message.

        Args:
            message: The error message
            error: Optional exception to include details from
        """
        data = None
        if error:
            data = {
                "error_type": type(error).__name__,
                "error_message": str(error),
            }
        self._log(LogLevel.ERROR, "ERROR", Colors.ERROR, message, data)


# Default logger instance for general use
logger = Logger("Agent")
