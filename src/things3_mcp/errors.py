"""
Tool-side error types

Everything a tool handler raises on purpose derives from ToolError, whose
`message` is the text the client sees in the {"error": ...} payload.
`code` is for logs and branching and is not part of that text.
"""

from typing import Optional


class ToolError(Exception):
    """Expected failure while executing a tool."""

    def __init__(self, message: str, *, code: Optional[str] = None):
        safe_message = message.strip() if isinstance(message, str) else ""
        if not safe_message:
            safe_message = "Unknown tool error"
        super().__init__(safe_message)
        self.message = safe_message
        self.code = code

    def __str__(self) -> str:
        return f"{self.message} (code={self.code})" if self.code else self.message


class ToolArgumentError(ToolError):
    """Arguments did not match what the tool accepts."""

    def __init__(self, message: str):
        super().__init__(message, code="invalid_arguments")


class ThingsError(ToolError):
    """The Things3 bridge failed (app not running, script error, ...)."""

    def __init__(self, message: str, *, code: Optional[str] = "things_error"):
        super().__init__(message, code=code)


class ThingsTimeoutError(ThingsError):
    def __init__(self, timeout: float):
        super().__init__(f"Things3 did not respond within {timeout:g}s", code="timeout")
        self.timeout = timeout
