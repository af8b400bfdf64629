"""
Dispatcher — Route MCP methods to the tool registry

Routes:
  initialize                 -> handshake, capabilities carry the tool catalog
  notifications/initialized  -> notification (no response)
  notifications/cancelled    -> notification (no response, call keeps running)
  ping                       -> {}
  tools/list                 -> registered tool catalog
  tools/call                 -> tool handler dispatch

Two kinds of failure leave this module:
  - ProtocolError: the request could not be routed (unknown tool, bad
    params, unserializable result). The server sends a JSON-RPC error.
  - Handler exceptions never leave. They become a normal tools/call
    result with isError: true.
"""

import sys
from typing import Any, Dict, List, Optional

from things3_mcp.config import Config
from things3_mcp.server.logger import call_context, get_logger
from things3_mcp.server.outcome import (
    DomainFailure,
    Outcome,
    Success,
    failure_message,
    to_envelope,
)
from things3_mcp.server.protocol import (
    initialize_result,
    ProtocolError,
    METHOD_NOT_FOUND,
    INVALID_PARAMS,
    INTERNAL_ERROR,
)
from things3_mcp.server.registry import ToolRegistry

log = get_logger("dispatcher")


class Dispatcher:
    """MCP method dispatcher bound to one registry."""

    def __init__(self, registry: ToolRegistry):
        self._registry = registry
        self._catalog: List[Dict[str, Any]] = [
            definition.as_mcp_tool() for definition in registry.get_tool_definitions()
        ]
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    async def route(self, msg: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Route a validated message to the appropriate handler.
        Returns the result payload or None for notifications.
        """
        method = msg.get("method", "")
        params = msg.get("params")
        if params is None:
            params = {}
        # only tools/call rejects non-object params; lifecycle methods ignore them
        options = params if isinstance(params, dict) else {}

        if method == "initialize":
            return self._handle_initialize(options)

        if method in ("initialized", "notifications/initialized"):
            self._initialized = True
            return None

        if method == "notifications/cancelled":
            log.info(f"Cancellation ignored for request {options.get('requestId', '?')}")
            return None

        if method == "ping":
            return {}

        if method == "tools/list":
            return self.list_tools()

        if method == "tools/call":
            return await self.call_tool(params, request_id=msg.get("id"))

        raise ProtocolError(METHOD_NOT_FOUND, f"Unknown method: {method}")

    def _handle_initialize(self, params: Dict) -> Dict[str, Any]:
        client = params.get("clientInfo")
        if not isinstance(client, dict):
            client = {}
        log.info(
            f"Client initialize: {client.get('name', '?')} "
            f"protocol={params.get('protocolVersion', '?')}"
        )
        return initialize_result(
            server_name=Config.SERVER_NAME,
            server_version=Config.SERVER_VERSION,
            protocol_version=Config.PROTOCOL_VERSION,
            catalog=self._catalog,
        )

    def list_tools(self) -> Dict[str, Any]:
        return {"tools": [dict(tool) for tool in self._catalog]}

    async def call_tool(self, params: Dict[str, Any], request_id: Any = None) -> Dict[str, Any]:
        if not isinstance(params, dict):
            raise ProtocolError(INVALID_PARAMS, "tools/call params must be an object")

        name = params.get("name")
        args = params.get("arguments")
        if args is None:
            args = {}

        if not isinstance(name, str) or not name:
            raise ProtocolError(INVALID_PARAMS, "Missing tool name")
        if not isinstance(args, dict):
            raise ProtocolError(INVALID_PARAMS, f"Arguments for {name} must be an object")

        if self._registry.get_handler(name) is None:
            raise ProtocolError(METHOD_NOT_FOUND, f"Unknown tool: {name}")

        outcome = await self._execute(name, args, request_id)

        try:
            return to_envelope(outcome)
        except (TypeError, ValueError) as exc:
            log.error(
                f"Tool {name} result could not be serialized: {exc}",
                extra=call_context(name, request_id),
            )
            raise ProtocolError(
                INTERNAL_ERROR,
                f"Tool {name} returned a result that is not JSON-serializable: {exc}",
            ) from exc

    async def _execute(self, name: str, args: Dict[str, Any], request_id: Any = None) -> Outcome:
        log.debug(f"Calling {name}", extra=call_context(name, request_id))
        try:
            result = await self._registry.execute_tool(name, args)
        except (KeyboardInterrupt, SystemExit):
            raise
        except BaseException as exc:
            # Calls are never cancelled by the server, so a CancelledError
            # here came from the handler itself and is its failure.
            message = failure_message(exc)
            _log_failure(name, message, request_id)
            return DomainFailure(message)
        return Success(result)


def _log_failure(name: str, message: str, request_id: Any = None) -> None:
    try:
        log.error(
            f"Tool {name} execution failed: {message}",
            extra=call_context(name, request_id),
        )
    except Exception as exc:
        # stderr is outside the protocol stream
        print(f"things3-mcp: logging failed ({exc}); tool {name}: {message}", file=sys.stderr)
