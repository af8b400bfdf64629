"""
Bulk tools

Tools:
  bulk_move          — Move several to-dos to a list, project or area
  bulk_complete      — Complete several to-dos
  bulk_update_dates  — Reschedule several to-dos or set their deadline

The whole batch runs in one script; the first ID that cannot be found
aborts the rest, and the error names that ID.
"""

from typing import List

from things3_mcp.errors import ToolArgumentError
from things3_mcp.server.registry import ToolDefinition
from things3_mcp.things import scripts
from things3_mcp.things.bridge import ThingsBridge
from things3_mcp.tools._common import DEADLINE, IDS, WHEN, check_when, define, require_one_of

MOVE_LISTS = ["inbox", "today", "anytime", "someday"]


def build_tools(bridge: ThingsBridge) -> List[ToolDefinition]:

    async def bulk_move(args):
        require_one_of(args, ["list", "project_id", "area_id"])
        return await bridge.run(scripts.BULK_MOVE, args)

    async def bulk_complete(args):
        return await bridge.run(scripts.BULK_COMPLETE, args)

    async def bulk_update_dates(args):
        if "when" not in args and "deadline" not in args:
            raise ToolArgumentError("Provide when, deadline or both")
        check_when(args)
        return await bridge.run(scripts.BULK_UPDATE_DATES, args)

    return [
        define(
            "bulk_move",
            "Move several Things3 to-dos at once to a built-in list, a project or an area.",
            {
                "ids": IDS,
                "list": {"type": "string", "enum": MOVE_LISTS, "description": "Built-in list"},
                "project_id": {"type": "string", "description": "Target project"},
                "area_id": {"type": "string", "description": "Target area"},
            },
            bulk_move,
            required=["ids"],
        ),
        define("bulk_complete", "Mark several Things3 to-dos as completed.", {"ids": IDS}, bulk_complete, required=["ids"]),
        define(
            "bulk_update_dates",
            "Set the schedule and/or deadline of several Things3 to-dos.",
            {"ids": IDS, "when": WHEN, "deadline": DEADLINE},
            bulk_update_dates,
            required=["ids"],
        ),
    ]
