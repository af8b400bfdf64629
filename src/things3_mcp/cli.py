"""
Things3 MCP CLI

Commands:
    things3-mcp init        Create ~/.things3-mcp/ and generate config
    things3-mcp server      Start the MCP server (stdio mode)
    things3-mcp tools       Print the tool catalog
    things3-mcp mcp-config  Print the MCP client JSON config
"""

import asyncio
import json
import sys

import click

from things3_mcp import __version__
from things3_mcp.config import Config


@click.group()
@click.version_option(version=__version__, prog_name="things3-mcp")
def main():
    """Things3 over MCP — to-dos, projects, areas and tags for AI clients."""
    pass


@main.command()
def init():
    """Initialize: create ~/.things3-mcp/, generate config, print setup instructions."""
    Config.ensure_dirs()

    config_env = Config.DATA_DIR / "config.env"
    if not config_env.exists():
        config_env.write_text(
            "# Things3 MCP Configuration\n"
            "# Uncomment and edit as needed.\n"
            "\n"
            "# THINGS3_MCP_LOG_LEVEL=INFO\n"
            "# THINGS3_MCP_ORDERED_RESPONSES=true\n"
            "# THINGS3_MCP_OSASCRIPT=osascript\n"
            "# THINGS3_MCP_MAX_MESSAGE_BYTES=1048576\n"
            "# THINGS3_MCP_SCRIPT_TIMEOUT=30\n"
        )

    click.echo(f"Things3 MCP initialized at {Config.DATA_DIR}")
    click.echo(f"  Config: {config_env}")
    click.echo(f"  Logs:   {Config.LOG_DIR}")
    click.echo()
    click.echo("Next: add things3-mcp to your MCP client settings.")
    click.echo("Run `things3-mcp mcp-config` to get the JSON snippet.")


@main.command()
@click.option(
    "--ordered/--unordered",
    default=None,
    help="Write responses in request order (default from THINGS3_MCP_ORDERED_RESPONSES).",
)
def server(ordered):
    """Start the Things3 MCP server (stdio mode)."""
    from things3_mcp.server.server import Things3Server

    async def _run():
        srv = Things3Server(ordered_responses=ordered, install_signal_handlers=True)
        try:
            await srv.start()
        finally:
            await srv.stop()

    try:
        asyncio.run(_run())
    except KeyboardInterrupt:
        pass


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Print the tools/list payload as JSON.")
def tools(as_json):
    """Print the tool catalog."""
    from things3_mcp.things.bridge import ThingsBridge
    from things3_mcp.tools import build_all_tools

    definitions = build_all_tools(ThingsBridge())

    if as_json:
        click.echo(json.dumps({"tools": [d.as_mcp_tool() for d in definitions]}, indent=2))
        return

    click.echo(f"{len(definitions)} tools")
    click.echo("=" * 40)
    for definition in definitions:
        click.echo(f"{definition.name}: {definition.description}")


@main.command("mcp-config")
def mcp_config():
    """Print MCP config JSON for Claude Desktop or other MCP clients."""
    command, args = _server_command()

    config = {
        "mcpServers": {
            "things3": {
                "command": command,
                "args": args,
            }
        }
    }

    click.echo("Add this to your MCP client settings:\n")
    click.echo(json.dumps(config, indent=2))


def _server_command():
    """Find how to launch the server: the console script, else python -m."""
    import shutil
    path = shutil.which("things3-mcp")
    if path:
        return path, ["server"]
    return sys.executable, ["-m", "things3_mcp", "server"]


if __name__ == "__main__":
    main()
