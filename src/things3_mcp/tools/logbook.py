"""
Logbook tools

Tools:
  logbook_search  — Search completed to-dos by text and completion date
"""

from typing import List

from things3_mcp.errors import ToolArgumentError
from things3_mcp.server.registry import ToolDefinition
from things3_mcp.things import scripts
from things3_mcp.things.bridge import ThingsBridge
from things3_mcp.tools._common import define


def build_tools(bridge: ThingsBridge) -> List[ToolDefinition]:

    async def logbook_search(args):
        since, until = args.get("since"), args.get("until")
        if since and until and since > until:
            raise ToolArgumentError("'since' must not be after 'until'")
        items = await bridge.run(scripts.LOGBOOK_SEARCH, args) or []
        return {"items": items, "count": len(items)}

    return [
        define(
            "logbook_search",
            "Search the Things3 Logbook by text in title or notes and by completion date range.",
            {
                "query": {"type": "string", "description": "Case-insensitive text to look for"},
                "since": {"type": "string", "format": "date", "description": "Completed on or after (YYYY-MM-DD)"},
                "until": {"type": "string", "format": "date", "description": "Completed on or before (YYYY-MM-DD)"},
                "limit": {
                    "type": "integer", "minimum": 1, "maximum": 500, "default": 50,
                    "description": "Maximum results (default: 50)",
                },
            },
            logbook_search,
        ),
    ]
