"""Shared fixtures for things3-mcp tests."""

import os
import tempfile

# Config reads THINGS3_MCP_DATA_DIR at import time; keep test logs out of ~
os.environ.setdefault("THINGS3_MCP_DATA_DIR", tempfile.mkdtemp(prefix="things3-mcp-tests-"))

import pytest

from things3_mcp.server.registry import ToolDefinition


@pytest.fixture
def tmp_data_dir(tmp_path):
    """Point Config at a temp directory for isolated tests."""
    data_dir = tmp_path / ".things3-mcp"
    data_dir.mkdir()
    (data_dir / "logs").mkdir()

    from things3_mcp import config
    saved = (config.Config.DATA_DIR, config.Config.LOG_DIR)
    config.Config.DATA_DIR = data_dir
    config.Config.LOG_DIR = data_dir / "logs"

    yield data_dir

    config.Config.DATA_DIR, config.Config.LOG_DIR = saved


def make_tool(name, handler=None, description=None, schema=None):
    """A ToolDefinition with an echoing handler unless one is given."""
    async def echo(args):
        return {"tool": name, "args": args}

    return ToolDefinition(
        name=name,
        description=description or f"{name} test tool",
        input_schema=schema or {"type": "object", "properties": {}},
        handler=handler or echo,
    )


class FakeBridge:
    """Stands in for ThingsBridge; records every script run."""

    def __init__(self, result=None, error=None):
        self.calls = []
        self.result = result
        self.error = error

    async def run(self, script, payload=None, require_running=True):
        self.calls.append({
            "script": script,
            "payload": payload,
            "require_running": require_running,
        })
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def fake_bridge():
    return FakeBridge(result=[])
