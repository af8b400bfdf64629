"""
Project tools

Tools:
  projects_list      — List projects, optionally within an area
  projects_get       — One project with its to-dos
  projects_create    — Create a project
  projects_update    — Change a project's fields or area
  projects_complete  — Mark a project as completed
"""

from typing import List

from things3_mcp.errors import ToolArgumentError
from things3_mcp.server.registry import ToolDefinition
from things3_mcp.things import scripts
from things3_mcp.things.bridge import ThingsBridge
from things3_mcp.tools._common import (
    DEADLINE, ID, NOTES, TAGS, TITLE, WHEN,
    check_when,
    define,
)

_UPDATABLE = ("title", "notes", "when", "deadline", "tags", "area_id")


def build_tools(bridge: ThingsBridge) -> List[ToolDefinition]:

    async def projects_list(args):
        return await bridge.run(scripts.PROJECTS_LIST, args)

    async def projects_get(args):
        return await bridge.run(scripts.PROJECTS_GET, args)

    async def projects_create(args):
        check_when(args)
        return await bridge.run(scripts.PROJECTS_CREATE, args)

    async def projects_update(args):
        if not any(key in args for key in _UPDATABLE):
            raise ToolArgumentError(f"Nothing to update; provide one of: {', '.join(_UPDATABLE)}")
        check_when(args)
        return await bridge.run(scripts.PROJECTS_UPDATE, args)

    async def projects_complete(args):
        return await bridge.run(scripts.PROJECTS_COMPLETE, args)

    area_id = {"type": "string", "description": "Area ID"}

    return [
        define(
            "projects_list",
            "List Things3 projects, optionally only those in one area or with one status.",
            {
                "area_id": area_id,
                "status": {"type": "string", "enum": ["open", "completed", "canceled"]},
                "include_items": {
                    "type": "boolean", "default": False,
                    "description": "Include each project's to-dos",
                },
            },
            projects_list,
        ),
        define("projects_get", "Get a Things3 project by ID together with its to-dos.", {"id": ID}, projects_get, required=["id"]),
        define(
            "projects_create",
            "Create a Things3 project, optionally in an area, scheduled and tagged.",
            {"title": TITLE, "notes": NOTES, "when": WHEN, "deadline": DEADLINE, "tags": TAGS, "area_id": area_id},
            projects_create,
            required=["title"],
        ),
        define(
            "projects_update",
            "Update a Things3 project. Only the given fields change.",
            {
                "id": ID, "title": TITLE, "notes": NOTES, "when": WHEN,
                "deadline": DEADLINE, "tags": TAGS, "area_id": area_id,
            },
            projects_update,
            required=["id"],
        ),
        define("projects_complete", "Mark a Things3 project as completed.", {"id": ID}, projects_complete, required=["id"]),
    ]
