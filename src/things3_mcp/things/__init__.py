"""Things3 access through JXA/osascript."""

from things3_mcp.things.bridge import ThingsBridge, extract_script_error

__all__ = ["ThingsBridge", "extract_script_error"]
