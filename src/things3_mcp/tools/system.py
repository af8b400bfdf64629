"""
System tools

Tools:
  system_refresh  — Move completed to-dos to the Logbook now
  system_launch   — Start Things3 if it is not running
  system_status   — Whether Things3 is running, and its version
"""

from typing import List

from things3_mcp.server.registry import ToolDefinition
from things3_mcp.things import scripts
from things3_mcp.things.bridge import ThingsBridge
from things3_mcp.tools._common import define


def build_tools(bridge: ThingsBridge) -> List[ToolDefinition]:

    async def system_refresh(args):
        return await bridge.run(scripts.SYSTEM_REFRESH, args)

    async def system_launch(args):
        return await bridge.run(scripts.SYSTEM_LAUNCH, args, require_running=False)

    async def system_status(args):
        return await bridge.run(scripts.SYSTEM_STATUS, args, require_running=False)

    return [
        define("system_refresh", "Move completed Things3 to-dos to the Logbook now.", {}, system_refresh),
        define("system_launch", "Launch Things3 if it is not already running.", {}, system_launch),
        define("system_status", "Report whether Things3 is running and which version it is.", {}, system_status),
    ]
