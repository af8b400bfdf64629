"""
To-do tools

Tools:
  todos_list        — List to-dos from a built-in list, project, area or tag
  todos_get         — One to-do by ID
  todos_create      — Create a to-do
  todos_update      — Change title, notes, schedule, deadline or tags
  todos_complete    — Mark as completed
  todos_uncomplete  — Reopen a completed to-do
  todos_delete      — Move to the Trash
"""

from typing import Any, Dict, List

from things3_mcp.errors import ToolArgumentError
from things3_mcp.server.registry import ToolDefinition
from things3_mcp.things import scripts
from things3_mcp.things.bridge import ThingsBridge
from things3_mcp.tools._common import (
    DEADLINE, ID, NOTES, TAGS, TITLE, WHEN,
    check_when,
    define,
)

LIST_FILTERS = ["inbox", "today", "upcoming", "anytime", "someday", "logbook", "trash"]
STATUSES = ["open", "completed", "canceled"]
_UPDATABLE = ("title", "notes", "when", "deadline", "tags")


def build_tools(bridge: ThingsBridge) -> List[ToolDefinition]:

    async def todos_list(args: Dict[str, Any]) -> Dict[str, Any]:
        sources = [key for key in ("filter", "project_id", "area_id") if key in args]
        if len(sources) > 1:
            raise ToolArgumentError(f"Provide only one of: {', '.join(sources)}")
        items = await bridge.run(scripts.TODOS_LIST, args) or []
        return {"items": items, "count": len(items)}

    async def todos_get(args):
        return await bridge.run(scripts.TODOS_GET, args)

    async def todos_create(args):
        if "project_id" in args and "area_id" in args:
            raise ToolArgumentError("Provide only one of: project_id, area_id")
        check_when(args)
        return await bridge.run(scripts.TODOS_CREATE, args)

    async def todos_update(args):
        if not any(key in args for key in _UPDATABLE):
            raise ToolArgumentError(f"Nothing to update; provide one of: {', '.join(_UPDATABLE)}")
        check_when(args)
        return await bridge.run(scripts.TODOS_UPDATE, args)

    async def todos_complete(args):
        return await bridge.run(scripts.TODOS_SET_STATUS, {"id": args["id"], "status": "completed"})

    async def todos_uncomplete(args):
        return await bridge.run(scripts.TODOS_SET_STATUS, {"id": args["id"], "status": "open"})

    async def todos_delete(args):
        return await bridge.run(scripts.TODOS_DELETE, args)

    return [
        define(
            "todos_list",
            "List Things3 to-dos. Filter by built-in list (inbox, today, upcoming, anytime, "
            "someday, logbook, trash), by project or area, by tag and by status.",
            {
                "filter": {"type": "string", "enum": LIST_FILTERS, "description": "Built-in list"},
                "project_id": {"type": "string", "description": "Only to-dos in this project"},
                "area_id": {"type": "string", "description": "Only to-dos in this area"},
                "tag": {"type": "string", "description": "Only to-dos carrying this tag"},
                "status": {"type": "string", "enum": STATUSES, "description": "Only to-dos with this status"},
                "limit": {
                    "type": "integer", "minimum": 1, "maximum": 1000, "default": 100,
                    "description": "Maximum number of to-dos (default: 100)",
                },
            },
            todos_list,
        ),
        define(
            "todos_get",
            "Get a single Things3 to-do by ID, including notes, tags, dates, project and area.",
            {"id": ID},
            todos_get,
            required=["id"],
        ),
        define(
            "todos_create",
            "Create a Things3 to-do, optionally inside a project or area, scheduled and tagged.",
            {
                "title": TITLE,
                "notes": NOTES,
                "when": WHEN,
                "deadline": DEADLINE,
                "tags": TAGS,
                "project_id": {"type": "string", "description": "Project to add the to-do to"},
                "area_id": {"type": "string", "description": "Area to add the to-do to"},
            },
            todos_create,
            required=["title"],
        ),
        define(
            "todos_update",
            "Update a Things3 to-do. Only the given fields change; tags replaces the tag set.",
            {"id": ID, "title": TITLE, "notes": NOTES, "when": WHEN, "deadline": DEADLINE, "tags": TAGS},
            todos_update,
            required=["id"],
        ),
        define("todos_complete", "Mark a Things3 to-do as completed.", {"id": ID}, todos_complete, required=["id"]),
        define("todos_uncomplete", "Reopen a completed Things3 to-do.", {"id": ID}, todos_uncomplete, required=["id"]),
        define("todos_delete", "Move a Things3 to-do to the Trash.", {"id": ID}, todos_delete, required=["id"]),
    ]
