"""
Things3 MCP Server — Composition root

Ties together:
  Channel -> Protocol -> Dispatcher -> Registry -> Tool handler

Flow:
  1. Channel reads one JSON-RPC message
  2. Protocol validates JSON-RPC 2.0
  3. Dispatcher routes it (tools/list, tools/call, lifecycle methods)
  4. Registry runs the tool handler
  5. Dispatcher folds the outcome into a tools/call envelope
  6. Channel writes the response

Response ordering (Config.ORDERED_RESPONSES):
  ordered   - one message at a time, responses in request order
  unordered - one task per message, responses as they complete
"""

import asyncio
import signal
from typing import Any, Dict, List, Optional, Set

from things3_mcp.config import Config
from things3_mcp.server.channel import Channel, StdioChannel
from things3_mcp.server.dispatcher import Dispatcher
from things3_mcp.server.logger import get_logger
from things3_mcp.server.protocol import (
    classify,
    error_reply,
    is_valid_id,
    result_reply,
    ProtocolError,
    INTERNAL_ERROR,
    NOTIFICATION,
    REPLY,
)
from things3_mcp.server.registry import ToolDefinition, ToolRegistry

log = get_logger("server")


class Things3Server:
    """
    Main server orchestrator.

    Usage:
        server = Things3Server()
        try:
            await server.start()
        finally:
            await server.stop()
    """

    def __init__(
        self,
        channel: Optional[Channel] = None,
        tools: Optional[List[ToolDefinition]] = None,
        ordered_responses: Optional[bool] = None,
        install_signal_handlers: bool = False,
    ):
        Config.ensure_dirs()

        self._channel = channel if channel is not None else StdioChannel()
        self._ordered = Config.ORDERED_RESPONSES if ordered_responses is None else ordered_responses
        self._install_signals = install_signal_handlers

        self._registry = ToolRegistry()
        self._register_tools(tools if tools is not None else _default_tools())
        self._dispatcher = Dispatcher(self._registry)

        self._running = False
        self._stopped = False
        self._release_task: Optional[asyncio.Future] = None
        self._serve_task: Optional[asyncio.Task] = None
        self._pending: Set[asyncio.Task] = set()
        self._write_lock = asyncio.Lock()

    def _register_tools(self, tools: List[ToolDefinition]):
        log.info("Registering Things3 tools...")
        for definition in tools:
            self._registry.register_tool(definition)
        self._registry.seal()
        log.info(f"Registered {self._registry.get_tool_count()} tools via registry")

    @property
    def registry(self) -> ToolRegistry:
        return self._registry

    @property
    def dispatcher(self) -> Dispatcher:
        return self._dispatcher

    @property
    def tool_count(self) -> int:
        return self._registry.get_tool_count()

    @property
    def running(self) -> bool:
        return self._running

    # -- main loop --

    async def start(self):
        """Open the channel and process messages until EOF, stop() or signal."""
        if self._stopped:
            raise RuntimeError("Server has been stopped")
        if self._running:
            raise RuntimeError("Server is already running")

        log.info(f"Starting {Config.SERVER_NAME} v{Config.SERVER_VERSION}")
        self._serve_task = asyncio.current_task()
        self._running = True

        try:
            await self._channel.open()
            if self._install_signals:
                self._add_signal_handlers()

            log.info(
                f"Server ready — tools={self.tool_count} "
                f"ordered_responses={self._ordered}"
            )

            while self._running:
                try:
                    msg = await self._channel.read_message()
                except ProtocolError as exc:
                    log.warning(f"Protocol error: {exc.message} (code={exc.code})")
                    await self._write(exc.reply(None))
                    continue

                if msg is None:
                    log.info("EOF on channel — shutting down")
                    break

                # Calls are never cancelled once started, stop() included.
                # asyncio.wait neither cancels the task nor re-raises its
                # outcome, so only a real cancellation of this loop ends it.
                task = asyncio.create_task(self._handle_message(msg))
                self._pending.add(task)
                task.add_done_callback(self._message_done)
                if self._ordered:
                    await asyncio.wait({task})

        except asyncio.CancelledError:
            if not self._stopped:
                raise
            log.info("Server loop cancelled by stop()")
        except Exception as exc:
            log.error(f"Server error: {exc}", exc_info=True)
        finally:
            self._running = False
            await self._release()

    def _message_done(self, task: asyncio.Task):
        self._pending.discard(task)
        if not task.cancelled() and task.exception() is not None:
            log.error(f"Message task failed: {task.exception()!r}")

    async def _handle_message(self, msg: Any):
        """Process a single JSON-RPC message through the full pipeline."""
        has_id = isinstance(msg, dict) and "id" in msg
        request_id = msg["id"] if has_id and is_valid_id(msg["id"]) else None

        try:
            kind = classify(msg)

            if kind == REPLY:
                log.debug(f"Ignoring client reply for id={request_id}")
                return

            result = await self._dispatcher.route(msg)

            if kind == NOTIFICATION or result is None:
                return

            await self._write(result_reply(request_id, result))

        except ProtocolError as exc:
            log.warning(f"Protocol error: {exc.message} (code={exc.code})")
            if has_id:
                await self._write(exc.reply(request_id))

        except Exception as exc:
            log.error(f"Unhandled error: {exc}", exc_info=True)
            if has_id:
                await self._write(error_reply(request_id, INTERNAL_ERROR, str(exc)))

    async def _write(self, message: Dict[str, Any]):
        async with self._write_lock:
            await self._channel.write_message(message)

    # -- shutdown --

    def _add_signal_handlers(self):
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, lambda: asyncio.create_task(self.stop()))
            except (NotImplementedError, RuntimeError):
                pass

    def _remove_signal_handlers(self):
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.remove_signal_handler(sig)
            except (NotImplementedError, RuntimeError):
                pass

    async def stop(self):
        """Stop serving and release the channel. Safe to call more than once."""
        if self._stopped:
            return
        serving = self._running
        self._stopped = True
        self._running = False

        task = self._serve_task
        if serving and task is not None and task is not asyncio.current_task() and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

        await self._release()

    async def _release(self):
        # One release for every caller; cancelling a caller does not cut it short
        if self._release_task is None:
            self._release_task = asyncio.ensure_future(self._close_channel())
        await asyncio.shield(self._release_task)

    async def _close_channel(self):
        if self._pending:
            log.info(f"Waiting for {len(self._pending)} in-flight calls")
            await asyncio.gather(*self._pending, return_exceptions=True)

        if self._install_signals:
            self._remove_signal_handlers()

        await self._channel.close()
        log.info("Server stopped")


def _default_tools() -> List[ToolDefinition]:
    from things3_mcp.things.bridge import ThingsBridge
    from things3_mcp.tools import build_all_tools

    return build_all_tools(ThingsBridge())
