"""Things3 MCP Server — Raw protocol implementation."""

from things3_mcp.server.server import Things3Server
from things3_mcp.server.dispatcher import Dispatcher
from things3_mcp.server.registry import ToolDefinition, ToolRegistry, DuplicateToolError
from things3_mcp.server.channel import MemoryChannel, StdioChannel

__all__ = [
    "Things3Server",
    "Dispatcher",
    "ToolDefinition",
    "ToolRegistry",
    "DuplicateToolError",
    "MemoryChannel",
    "StdioChannel",
]
