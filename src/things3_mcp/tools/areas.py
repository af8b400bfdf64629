"""
Area tools

Tools:
  areas_list    — List areas
  areas_create  — Create an area
"""

from typing import List

from things3_mcp.server.registry import ToolDefinition
from things3_mcp.things import scripts
from things3_mcp.things.bridge import ThingsBridge
from things3_mcp.tools._common import TAGS, TITLE, define


def build_tools(bridge: ThingsBridge) -> List[ToolDefinition]:

    async def areas_list(args):
        return await bridge.run(scripts.AREAS_LIST, args)

    async def areas_create(args):
        return await bridge.run(scripts.AREAS_CREATE, args)

    return [
        define("areas_list", "List all Things3 areas.", {}, areas_list),
        define("areas_create", "Create a Things3 area.", {"title": TITLE, "tags": TAGS}, areas_create, required=["title"]),
    ]
