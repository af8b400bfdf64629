"""
Tool Registry — name -> ToolDefinition lookup table

Every tool is the same flat record (name, description, input schema,
handler). The registry is filled once by the server, then sealed; after
that the catalog is fixed and every lookup is a plain dict read.
"""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional

from things3_mcp.server.logger import get_logger
from things3_mcp.server.protocol import ProtocolError, METHOD_NOT_FOUND

log = get_logger("registry")

ToolHandler = Callable[[Dict[str, Any]], Awaitable[Any]]


class DuplicateToolError(ValueError):
    """Raised when a tool name is registered twice."""


class RegistryFrozenError(RuntimeError):
    """Raised when registering into a sealed registry."""


@dataclass(frozen=True)
class ToolDefinition:
    name: str
    description: str
    input_schema: Dict[str, Any]
    handler: ToolHandler

    def __post_init__(self):
        if not self.name:
            raise ValueError("Tool name must be a non-empty string")
        if not self.description:
            raise ValueError(f"Tool {self.name} needs a description")

    def as_mcp_tool(self) -> Dict[str, Any]:
        """Discovery entry; the handler never leaves the process."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }


class ToolRegistry:
    """Ordered name -> ToolDefinition mapping, owned by one server."""

    def __init__(self, definitions: Optional[List[ToolDefinition]] = None):
        self._tools: Dict[str, ToolDefinition] = {}
        self._sealed = False
        for definition in definitions or []:
            self.register_tool(definition)

    def register_tool(self, definition: ToolDefinition) -> None:
        if self._sealed:
            raise RegistryFrozenError(
                f"Cannot register {definition.name}: registry is sealed"
            )
        if definition.name in self._tools:
            raise DuplicateToolError(f"Tool already registered: {definition.name}")
        self._tools[definition.name] = definition
        log.debug(f"Registered tool {definition.name}")

    def seal(self) -> None:
        """Fix the catalog. Called once startup registration is done."""
        self._sealed = True

    @property
    def sealed(self) -> bool:
        return self._sealed

    def get_tool_definitions(self) -> List[ToolDefinition]:
        return list(self._tools.values())

    def get_handler(self, name: str) -> Optional[ToolHandler]:
        definition = self._tools.get(name)
        return definition.handler if definition else None

    async def execute_tool(self, name: str, args: Dict[str, Any]) -> Any:
        """
        Run the handler for `name`. Handler exceptions propagate untouched;
        turning them into responses is the dispatcher's job.
        """
        handler = self.get_handler(name)
        if handler is None:
            raise ProtocolError(METHOD_NOT_FOUND, f"Unknown tool: {name}")
        return await handler(args)

    def get_tool_count(self) -> int:
        return len(self._tools)

    def __contains__(self, name: str) -> bool:
        return name in self._tools
