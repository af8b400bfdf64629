"""Things3 MCP — Things3 task management over the Model Context Protocol."""

__version__ = "0.2.0"
