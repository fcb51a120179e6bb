"""
GroundGate Utilities
=====================

Shared helpers for logging, hashing, text normalization and JSON I/O.
"""

from __future__ import annotations

import hashlib
import json
import logging
import sys
from pathlib import Path
from typing import Any


# ── Hashing ────────────────────────────────────────────────────────

def compute_hash(data: str | bytes | dict, length: int = 16) -> str:
    """
    Compute a truncated SHA-256 hash.

    Args:
        data: String, bytes, or dict to hash.
        length: Number of hex characters to return (max 64).
    """
    if isinstance(data, dict):
        data = json.dumps(data, sort_keys=True, default=str)
    if isinstance(data, str):
        data = data.encode("utf-8")
    return hashlib.sha256(data).hexdigest()[:length]


# ── Logging ────────────────────────────────────────────────────────

class JsonFormatter(logging.Formatter):
    """One JSON object per log record."""

    def format(self, record):
        log_entry = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry)


def setup_logging(level: str = "INFO", format_style: str = "text") -> logging.Logger:
    """
    Configure logging for the ``groundgate`` logger tree.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
        format_style: "json" for structured logs, "text" for human-readable.

    Returns:
        The configured ``groundgate`` logger.
    """
    logger = logging.getLogger("groundgate")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    if format_style == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%H:%M:%S",
        ))

    logger.addHandler(handler)
    return logger


# ── Text Processing Helpers ────────────────────────────────────────

def normalize_whitespace(text: str) -> str:
    """Collapse multiple whitespace characters into single spaces and strip."""
    return " ".join(text.split())


def truncate(text: str, limit: int = 60) -> str:
    """Shorten text for log lines."""
    return text if len(text) <= limit else text[: limit - 3] + "..."


# ── File I/O Helpers ───────────────────────────────────────────────

def save_json(data: Any, path: str | Path, indent: int = 2) -> Path:
    """Save data as formatted JSON file with UTF-8 encoding."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=indent, ensure_ascii=False, default=str)
    return path


def load_json(path: str | Path) -> Any:
    """Load a JSON file."""
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)
