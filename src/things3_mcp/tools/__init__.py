"""
Things3 MCP Tools

Modules:
  todos     — 7 to-do tools
  projects  — 5 project tools
  areas     — 2 area tools
  tags      — 4 tag tools
  bulk      — 3 batch tools
  logbook   — 1 logbook search tool
  system    — 3 app-level tools
"""

from typing import List

from things3_mcp.server.registry import ToolDefinition
from things3_mcp.things.bridge import ThingsBridge
from things3_mcp.tools import areas, bulk, logbook, projects, system, tags, todos

MODULES = (todos, projects, areas, tags, bulk, logbook, system)


def build_all_tools(bridge: ThingsBridge) -> List[ToolDefinition]:
    """Every tool definition, in catalog order, sharing one bridge."""
    definitions: List[ToolDefinition] = []
    for module in MODULES:
        definitions.extend(module.build_tools(bridge))
    return definitions
