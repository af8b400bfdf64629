"""
Tag tools

Tools:
  tags_list    — List tags with their parent tag
  tags_create  — Create a tag, optionally nested under a parent
  tags_add     — Add tags to a to-do or project
  tags_remove  — Remove tags from a to-do or project
"""

from typing import List

from things3_mcp.errors import ToolArgumentError
from things3_mcp.server.registry import ToolDefinition
from things3_mcp.things import scripts
from things3_mcp.things.bridge import ThingsBridge
from things3_mcp.tools._common import ID, define

_TAG_NAMES = {
    "type": "array",
    "items": {"type": "string"},
    "minItems": 1,
    "description": "Tag names",
}


def build_tools(bridge: ThingsBridge) -> List[ToolDefinition]:

    async def tags_list(args):
        return await bridge.run(scripts.TAGS_LIST, args)

    async def tags_create(args):
        name = args["name"].strip()
        if not name or "," in name:
            raise ToolArgumentError("Tag name must be non-empty and must not contain commas")
        return await bridge.run(scripts.TAGS_CREATE, dict(args, name=name))

    async def tags_add(args):
        return await bridge.run(scripts.TAGS_ASSIGN, dict(args, mode="add"))

    async def tags_remove(args):
        return await bridge.run(scripts.TAGS_ASSIGN, dict(args, mode="remove"))

    return [
        define("tags_list", "List all Things3 tags and their parent tags.", {}, tags_list),
        define(
            "tags_create",
            "Create a Things3 tag, optionally nested under an existing parent tag.",
            {
                "name": {"type": "string", "description": "Tag name"},
                "parent": {"type": "string", "description": "Parent tag name"},
            },
            tags_create,
            required=["name"],
        ),
        define(
            "tags_add",
            "Add tags to a Things3 to-do or project, keeping the tags it already has.",
            {"id": ID, "tags": _TAG_NAMES},
            tags_add,
            required=["id", "tags"],
        ),
        define(
            "tags_remove",
            "Remove tags from a Things3 to-do or project.",
            {"id": ID, "tags": _TAG_NAMES},
            tags_remove,
            required=["id", "tags"],
        ),
    ]
