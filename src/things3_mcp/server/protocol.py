"""
JSON-RPC 2.0 framing for the Things3 MCP server

Only what this server speaks:
  - classify() an incoming message (request, notification or a client reply)
  - result_reply() / error_reply() for the way back
  - initialize_result() for the handshake, which carries the tool catalog

tools/call envelopes live in outcome.py.
"""

from typing import Any, Dict, Iterable

JSONRPC_VERSION = "2.0"

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

REQUEST = "request"
NOTIFICATION = "notification"
REPLY = "reply"


class ProtocolError(Exception):
    """A message the server cannot route. Answered with a JSON-RPC error."""

    def __init__(self, code: int, message: str, data: Any = None):
        self.code = code
        self.message = message
        self.data = data
        super().__init__(message)

    def reply(self, request_id: Any = None) -> Dict[str, Any]:
        return error_reply(request_id, self.code, self.message, self.data)


def is_valid_id(value: Any) -> bool:
    """JSON-RPC ids are strings, numbers or null. Booleans are not numbers here."""
    if value is None or isinstance(value, str):
        return True
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def classify(msg: Any) -> str:
    """
    Return REQUEST, NOTIFICATION or REPLY (a client's answer to us).
    Raises ProtocolError(INVALID_REQUEST) for anything else.
    """
    if not isinstance(msg, dict):
        raise ProtocolError(INVALID_REQUEST, "Message must be a JSON object")
    if msg.get("jsonrpc") != JSONRPC_VERSION:
        raise ProtocolError(INVALID_REQUEST, f"Expected jsonrpc={JSONRPC_VERSION}")

    if "method" in msg:
        method = msg["method"]
        if not isinstance(method, str) or not method:
            raise ProtocolError(INVALID_REQUEST, "Method must be a non-empty string")
        params = msg.get("params")
        if params is not None and not isinstance(params, (dict, list)):
            raise ProtocolError(INVALID_REQUEST, "Params must be an object or an array")
        if "id" not in msg:
            return NOTIFICATION
        if not is_valid_id(msg["id"]):
            raise ProtocolError(INVALID_REQUEST, "Request id must be a string, number or null")
        return REQUEST

    if "id" in msg and ("result" in msg or "error" in msg):
        return REPLY

    raise ProtocolError(INVALID_REQUEST, "Cannot determine message type")


def result_reply(request_id: Any, result: Any) -> Dict[str, Any]:
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "result": result}


def error_reply(
    request_id: Any,
    code: int,
    message: str,
    data: Any = None,
) -> Dict[str, Any]:
    error: Dict[str, Any] = {"code": code, "message": message}
    if data is not None:
        error["data"] = data
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "error": error}


def initialize_result(
    server_name: str,
    server_version: str,
    protocol_version: str,
    catalog: Iterable[Dict[str, Any]] = (),
) -> Dict[str, Any]:
    """
    Handshake payload. The tools capability lists every tool by name
    (description + inputSchema) so a client knows the catalog before its
    first tools/list. The catalog never changes while the server runs.
    """
    tools: Dict[str, Any] = {
        tool["name"]: {
            "description": tool["description"],
            "inputSchema": tool["inputSchema"],
        }
        for tool in catalog
    }
    tools["listChanged"] = False

    return {
        "protocolVersion": protocol_version,
        "capabilities": {"tools": tools},
        "serverInfo": {"name": server_name, "version": server_version},
    }
