"""
Logging for things3-mcp

Every module logs below the "things3_mcp" logger. The files are attached
to that parent once per process, so all records share one format:

    2026-01-02 10:00:00 ERROR [things3_mcp.dispatcher] (tool=todos_get id=4) ...

The "(tool=... id=...)" part appears only on records logged with
call_context(). stdout carries the protocol, so nothing is logged there.
"""

import logging
from typing import Any, Dict

from things3_mcp.config import Config

ROOT_LOGGER = "things3_mcp"

_FORMAT = "%(asctime)s %(levelname)-5s [%(name)s]%(call)s %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"


class _CallContext(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        parts = []
        tool = getattr(record, "tool", None)
        if tool is not None:
            parts.append(f"tool={tool}")
        request_id = getattr(record, "request_id", None)
        if request_id is not None:
            parts.append(f"id={request_id}")
        record.call = f" ({' '.join(parts)})" if parts else ""
        return True


def call_context(tool: str, request_id: Any = None) -> Dict[str, Any]:
    """`extra=` mapping that tags a record with the tool call it belongs to."""
    return {"tool": tool, "request_id": request_id}


def _handler(path, level: int) -> logging.Handler:
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    handler.addFilter(_CallContext())
    handler.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATEFMT))
    return handler


def _root() -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER)
    if root.handlers:
        return root

    Config.ensure_dirs()
    level = logging.getLevelName(Config.LOG_LEVEL)
    root.setLevel(level if isinstance(level, int) else logging.INFO)
    root.addHandler(_handler(Config.LOG_FILE, logging.DEBUG))
    root.addHandler(_handler(Config.ERROR_LOG, logging.ERROR))
    root.propagate = False
    return root


def get_logger(name: str) -> logging.Logger:
    """Module logger, e.g. get_logger("dispatcher") -> things3_mcp.dispatcher."""
    return _root().getChild(name)
