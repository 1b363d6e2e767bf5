# SPDX-License-Identifier: MIT
"""Logging configuration for selftime.

Controls the console handler, the rotating ``selftime.log`` file and the
optional ``events.jsonl`` structured stream.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional


@dataclass
class LoggingConfig:
    """Dataclass configuration for the logging stack."""

    log_level: str = "WARNING"  # DEBUG|INFO|WARNING|ERROR
    log_dir: str = "logs"  # Directory for selftime.log and events.jsonl
    console: bool = True  # Enable console handler (stderr)
    file: bool = False  # Enable rotating file handler
    file_max_mb: int = 8  # Max log file size before rotation
    file_backup_count: int = 3  # Number of rotated backups to keep
    jsonl: bool = False  # Enable JSONL event stream
    jsonl_indent: Optional[int] = None  # Indent for JSONL (None for compact)

    console_fmt: str = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"
    file_fmt: str = "[%(asctime)s] [%(levelname)s] [%(name)s] [pid=%(process)d tid=%(threadName)s] %(message)s"
    date_fmt: str = "%Y-%m-%d %H:%M:%S"

    def to_dict(self) -> Dict[str, Any]:
        """Return a dictionary representation of this config."""
        return asdict(self)
