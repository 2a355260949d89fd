"""Structured local logging plus the installer's console status lines."""

from __future__ import annotations

import json
import logging
import logging.handlers
import os
import platform
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any


_LOGGER_NAME = "terminal_anywhere"

INSTALLER_HOME_ENV = "TA_INSTALLER_HOME"


def installer_home() -> Path:
    override = os.environ.get(INSTALLER_HOME_ENV, "").strip()
    if override:
        return Path(override).expanduser()
    if platform.system() == "Darwin":
        return Path.home() / "Library" / "Application Support" / "TerminalAnywhere"
    return Path.home() / ".config" / "terminal-anywhere"


def log_dir() -> Path:
    path = installer_home() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts_utc": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        if hasattr(record, "event"):
            payload["event"] = getattr(record, "event")
        return json.dumps(payload, ensure_ascii=True)


class ConsoleFormatter(logging.Formatter):
    """Render records as the installer's status lines (glyph + message).

    Records logged with ``extra={"event": "success"}`` get the success glyph
    instead of the plain info one.
    """

    _GLYPHS = {
        logging.DEBUG: ("·", "\033[2m"),
        logging.INFO: ("ℹ", "\033[0;34m"),
        logging.WARNING: ("⚠", "\033[1;33m"),
        logging.ERROR: ("❌", "\033[0;31m"),
        logging.CRITICAL: ("❌", "\033[0;31m"),
    }
    _SUCCESS = ("✅", "\033[0;32m")
    _RESET = "\033[0m"

    def __init__(self, color: bool = False) -> None:
        super().__init__("%(message)s")
        self.color = color

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        if getattr(record, "event", None) == "success":
            glyph, code = self._SUCCESS
        else:
            glyph, code = self._GLYPHS.get(record.levelno, self._GLYPHS[logging.INFO])
        if self.color:
            return f"{code}{glyph}{self._RESET} {message}"
        return f"{glyph} {message}"


def _stream_is_tty(stream: Any) -> bool:
    isatty = getattr(stream, "isatty", None)
    try:
        return bool(isatty and isatty())
    except ValueError:
        return False


def configure_logging(keep_files: int = 7, console: bool = True, verbose: bool = False) -> logging.Logger:
    logger = logging.getLogger(_LOGGER_NAME)
    if logger.handlers:
        return logger

    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    path = log_dir() / "installer.log"
    handler = logging.handlers.TimedRotatingFileHandler(
        filename=str(path),
        when="midnight",
        backupCount=max(2, keep_files),
        encoding="utf-8",
    )
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)

    if console:
        stream_handler = logging.StreamHandler(sys.stderr)
        stream_handler.setFormatter(ConsoleFormatter(color=_stream_is_tty(sys.stderr)))
        logger.addHandler(stream_handler)

    logger.debug("logging configured", extra={"event": "logging_configured"})
    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    if name:
        return logging.getLogger(f"{_LOGGER_NAME}.{name}")
    return logging.getLogger(_LOGGER_NAME)


def reset_logging() -> None:
    """Detach and close every handler installed by ``configure_logging``."""
    logger = logging.getLogger(_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
