"""
Channels — the message bus between one MCP client and the server

A channel moves whole JSON-RPC messages: read the next one, write one,
close. Two implementations:

  StdioChannel   newline-delimited JSON on stdin/stdout (production)
  MemoryChannel  asyncio queues (tests, embedding the server in-process)

Logs NEVER go to stdout.
"""

import asyncio
import json
import sys
from typing import Any, Dict, List, Optional, Protocol

from things3_mcp.server.logger import get_logger
from things3_mcp.config import Config
from things3_mcp.server.protocol import ProtocolError, INVALID_REQUEST, PARSE_ERROR

log = get_logger("channel")


class Channel(Protocol):
    async def open(self) -> None: ...

    async def read_message(self) -> Optional[Dict[str, Any]]:
        """Next message, None on EOF. Raises ProtocolError on undecodable input."""
        ...

    async def write_message(self, message: Dict[str, Any]) -> None: ...

    async def close(self) -> None: ...


def _decode(raw_bytes: bytes) -> Dict[str, Any]:
    try:
        return json.loads(raw_bytes)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        log.error(f"JSON parse error: {exc}")
        raise ProtocolError(PARSE_ERROR, f"Parse error: {exc}") from exc


def _encode(message: Dict[str, Any]) -> bytes:
    return (json.dumps(message, separators=(",", ":"), ensure_ascii=False) + "\n").encode("utf-8")


class StdioChannel:
    """Newline-delimited JSON-RPC over stdin/stdout."""

    def __init__(
        self,
        reader: Optional[asyncio.StreamReader] = None,
        stdout=None,
        limit: Optional[int] = None,
    ):
        self._reader = reader
        self._limit = limit if limit is not None else Config.MAX_MESSAGE_BYTES
        self._stdout = stdout
        self.running = False

    async def open(self):
        """Initialize async stdin reader and direct stdout writer."""
        if self._reader is None:
            loop = asyncio.get_running_loop()
            self._reader = asyncio.StreamReader(limit=self._limit)
            protocol = asyncio.StreamReaderProtocol(self._reader)
            await loop.connect_read_pipe(lambda: protocol, sys.stdin.buffer)

        if self._stdout is None:
            self._stdout = sys.stdout.buffer
        self.running = True
        log.info("Stdio channel opened")

    async def read_message(self) -> Optional[Dict[str, Any]]:
        if not self._reader:
            raise RuntimeError("Channel not open")

        while True:
            try:
                raw_bytes = await self._reader.readline()
            except ValueError as exc:
                # readline() has already dropped the buffered part of the line
                log.error(f"Oversized message dropped: {exc}")
                raise ProtocolError(INVALID_REQUEST, "Message exceeds the size limit") from exc
            if not raw_bytes:
                return None
            if raw_bytes.strip():
                return _decode(raw_bytes)

    async def write_message(self, message: Dict[str, Any]):
        if self._stdout is None:
            raise RuntimeError("Channel not open")

        self._stdout.write(_encode(message))
        self._stdout.flush()

    async def close(self):
        if not self.running:
            return
        self.running = False
        log.info("Stdio channel closed")


class MemoryChannel:
    """
    In-process channel. Feed requests with send(), collect what the
    server wrote from `sent` or with receive().
    """

    _EOF = object()

    def __init__(self):
        self._incoming: asyncio.Queue = asyncio.Queue()
        self._outgoing: asyncio.Queue = asyncio.Queue()
        self.sent: List[Dict[str, Any]] = []
        self.opened = False
        self.closed = False

    async def open(self):
        self.opened = True

    def send(self, message: Any):
        """Queue a message for the server (dicts, or raw bytes/str lines)."""
        self._incoming.put_nowait(message)

    def end(self):
        """Signal EOF to the server."""
        self._incoming.put_nowait(self._EOF)

    async def receive(self, timeout: float = 5.0) -> Dict[str, Any]:
        return await asyncio.wait_for(self._outgoing.get(), timeout)

    async def read_message(self) -> Optional[Dict[str, Any]]:
        if self.closed:
            return None
        item = await self._incoming.get()
        if item is self._EOF:
            return None
        if isinstance(item, (bytes, str)):
            return _decode(item.encode("utf-8") if isinstance(item, str) else item)
        return item

    async def write_message(self, message: Dict[str, Any]):
        if self.closed:
            raise RuntimeError("Channel closed")
        self.sent.append(message)
        self._outgoing.put_nowait(message)

    async def close(self):
        self.closed = True
        self._incoming.put_nowait(self._EOF)
