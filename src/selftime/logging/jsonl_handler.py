# SPDX-License-Identifier: MIT
"""Profiler event stream.

Each record becomes one JSON line::

    {"ts": "...", "level": "INFO", "logger": "selftime.session",
     "event": "session_finished", "root": "total", "report": [...]}

Fields of the ``payload`` dict attached by :func:`~selftime.logging.log_event`
are merged into the top level; plain records (clock warnings, scope traces)
carry just the header fields.
"""
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

PAYLOAD_ATTR = "payload"


def record_to_event(record: logging.LogRecord) -> Dict[str, Any]:
    event: Dict[str, Any] = {
        "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
        "level": record.levelname,
        "logger": record.name,
        "event": record.getMessage(),
    }
    for key, value in (getattr(record, PAYLOAD_ATTR, None) or {}).items():
        event.setdefault(key, value)
    if record.exc_info:
        event["error"] = logging.Formatter().formatException(record.exc_info)
    return event


class JSONLHandler(logging.Handler):
    """Append events to a ``.jsonl`` file, one object per line."""

    def __init__(self, filepath: Path, indent: Optional[int] = None) -> None:
        super().__init__()
        self.path = Path(filepath)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._fh = self.path.open("a", encoding="utf-8")
        self._indent = indent

    def emit(self, record: logging.LogRecord) -> None:
        try:
            # scope identifiers may be any hashable; fall back to str()
            line = json.dumps(record_to_event(record), ensure_ascii=False, indent=self._indent, default=str)
            self._fh.write(line + "\n")
            self._fh.flush()
        except Exception:
            self.handleError(record)

    def close(self) -> None:
        if not self._fh.closed:
            self._fh.close()
        super().close()
