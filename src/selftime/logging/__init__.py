# SPDX-License-Identifier: MIT
# selftime logging package:
# - console + rotating file handlers on the "selftime" logger
# - optional JSONL event stream
from .config import LoggingConfig
from .jsonl_handler import JSONLHandler
from .logger import JSONL_FILE_NAME, LOG_FILE_NAME, get_logger, init_logging, log_event

__all__ = [
    "LoggingConfig",
    "JSONLHandler",
    "init_logging",
    "get_logger",
    "log_event",
    "LOG_FILE_NAME",
    "JSONL_FILE_NAME",
]
