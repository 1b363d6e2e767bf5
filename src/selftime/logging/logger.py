# SPDX-License-Identifier: MIT
"""Core logging utilities.

Library modules only ever call :func:`get_logger`; handlers are installed by
the application (or the CLI) through :func:`init_logging`.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional

from .config import LoggingConfig
from .jsonl_handler import PAYLOAD_ATTR, JSONLHandler

LOG_FILE_NAME = "selftime.log"
JSONL_FILE_NAME = "events.jsonl"

# Cache of named loggers for quick reuse
_LOGGERS: Dict[str, logging.Logger] = {}

logging.getLogger("selftime").addHandler(logging.NullHandler())


def init_logging(cfg: Optional[LoggingConfig] = None) -> logging.Logger:
    """Configure the ``selftime`` logger hierarchy according to ``cfg``.

    Calling it again replaces the handlers installed by the previous call.
    """
    cfg = cfg or LoggingConfig()
    level = getattr(logging, cfg.log_level.upper(), logging.INFO)

    base = logging.getLogger("selftime")
    base.setLevel(level)
    for h in list(base.handlers):
        base.removeHandler(h)
        h.close()

    if cfg.console:
        ch = logging.StreamHandler(sys.stderr)
        ch.setLevel(level)
        ch.setFormatter(logging.Formatter(cfg.console_fmt, datefmt=cfg.date_fmt))
        base.addHandler(ch)

    if cfg.file or cfg.jsonl:
        Path(cfg.log_dir).mkdir(parents=True, exist_ok=True)

    if cfg.file:
        fh = RotatingFileHandler(
            filename=Path(cfg.log_dir) / LOG_FILE_NAME,
            maxBytes=cfg.file_max_mb * 1024 * 1024,
            backupCount=cfg.file_backup_count,
            encoding="utf-8",
        )
        fh.setLevel(level)
        fh.setFormatter(logging.Formatter(cfg.file_fmt, datefmt=cfg.date_fmt))
        base.addHandler(fh)

    if cfg.jsonl:
        jh = JSONLHandler(filepath=Path(cfg.log_dir) / JSONL_FILE_NAME, indent=cfg.jsonl_indent)
        jh.setLevel(level)
        base.addHandler(jh)

    if not base.handlers:
        base.addHandler(logging.NullHandler())
    return base


def get_logger(name: str) -> logging.Logger:
    """Return a cached logger with ``name``."""
    if name not in _LOGGERS:
        _LOGGERS[name] = logging.getLogger(name)
    return _LOGGERS[name]


def log_event(event: str, payload: Dict[str, Any], logger: Optional[logging.Logger] = None) -> None:
    """Log ``event`` at INFO with ``payload`` attached for the JSONL stream."""
    lg = logger or get_logger("selftime")
    lg.info(event, extra={PAYLOAD_ATTR: payload})
