"""Logging configuration for node drivers.

Records that carry a NodeError, either as the logged exception or as an
``error`` extra built with ``NodeError.to_dict()``, get the error's
category and node attached so failed deploys can be filtered by kind of
failure rather than by message text.
"""
from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from labnode.config import settings
from labnode.errors import NodeError

_STANDARD_ATTRS = set(vars(logging.makeLogRecord({}))) | {"message", "taskName"}


def record_error(record: logging.LogRecord) -> dict[str, Any] | None:
    """Return the structured NodeError attached to a record, if any."""
    if record.exc_info and isinstance(record.exc_info[1], NodeError):
        return record.exc_info[1].to_dict()
    error = getattr(record, "error", None)
    if isinstance(error, dict):
        return error
    return None


class NodeJSONFormatter(logging.Formatter):
    """JSON log formatter.

    Fields: timestamp, level, logger, message, service ("labnode"), node
    (formatter default, or the node named by the error), error (category,
    message, node_name of a NodeError), exception (traceback of anything
    else) and extra.
    """

    def __init__(self, node_name: str = ""):
        super().__init__()
        self.node_name = node_name

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": "labnode",
        }

        error = record_error(record)
        node = self.node_name or (error or {}).get("node_name")
        if node:
            log_entry["node"] = node

        if error:
            log_entry["error"] = error
        elif record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        extra = {}
        for key, value in record.__dict__.items():
            if key in _STANDARD_ATTRS or (key == "error" and error):
                continue
            try:
                json.dumps(value)
                extra[key] = value
            except (TypeError, ValueError):
                extra[key] = str(value)
        if extra:
            log_entry["extra"] = extra

        return json.dumps(log_entry)


class NodeTextFormatter(logging.Formatter):
    """Human-readable formatter (development use).

    [timestamp] LEVEL [node] logger: message {category}
    """

    def __init__(self, node_name: str = ""):
        super().__init__()
        self.node_name = node_name

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
        error = record_error(record)
        node = self.node_name or (error or {}).get("node_name")
        node_part = f" [{node}]" if node else ""

        message = f"[{timestamp}] {record.levelname:8}{node_part} {record.name}: {record.getMessage()}"

        # NodeErrors are expected failures, their category says enough
        if error:
            message += f" {{{error['category']}}}"
        elif record.exc_info:
            message += f"\n{self.formatException(record.exc_info)}"

        return message


def setup_logging(node_name: str = "") -> None:
    """Install a stdout handler on the root logger per settings.log_format.

    Args:
        node_name: Node name stamped on every entry, for processes that
            drive a single node
    """
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    if settings.log_format.lower() == "json":
        handler.setFormatter(NodeJSONFormatter(node_name))
    else:
        handler.setFormatter(NodeTextFormatter(node_name))

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for existing_handler in root_logger.handlers[:]:
        root_logger.removeHandler(existing_handler)
    root_logger.addHandler(handler)

    # Session transports log every packet at INFO
    for name in ("docker", "asyncssh", "scrapli", "scrapli_netconf"):
        logging.getLogger(name).setLevel(logging.WARNING)
