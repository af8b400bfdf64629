"""
Things3 Bridge — run JXA against Things3 through osascript

One subprocess per call:
    osascript -l JavaScript -e <prelude + script> <json payload>

stdout carries the JSON-encoded return value. A non-zero exit means the
script threw; the error text is pulled out of osascript's stderr so the
client sees "Things3 is not running" rather than the raw osascript line.
"""

import asyncio
import json
import re
from typing import Any, Dict, List, Optional

from things3_mcp.config import Config
from things3_mcp.errors import ThingsError, ThingsTimeoutError
from things3_mcp.server.logger import get_logger
from things3_mcp.things.scripts import PRELUDE

log = get_logger("things.bridge")

# e.g. "execution error: Error: Things3 is not running (-2700)"
_EXECUTION_ERROR = re.compile(r"execution error:\s*(?:Error:\s*)?(.*?)(?:\s*\(-?\d+\))?\s*$")


def extract_script_error(stderr: str, returncode: Optional[int] = None) -> str:
    """Turn osascript stderr into the message a client should see."""
    lines = [line.strip() for line in stderr.splitlines() if line.strip()]
    for line in reversed(lines):
        match = _EXECUTION_ERROR.search(line)
        if match and match.group(1):
            return match.group(1)
    if lines:
        return lines[-1]
    return f"osascript exited with status {returncode}"


class ThingsBridge:
    """Executes JXA scripts against the Things3 app."""

    def __init__(
        self,
        osascript: Optional[str] = None,
        timeout: Optional[float] = None,
        app_name: Optional[str] = None,
    ):
        self.osascript = osascript or Config.OSASCRIPT
        self.timeout = timeout if timeout is not None else Config.SCRIPT_TIMEOUT
        self.app_name = app_name or Config.THINGS_APP

    def build_source(self, script: str, require_running: bool = True) -> str:
        header = (
            f"const APP_NAME = {json.dumps(self.app_name)};\n"
            f"const REQUIRE_RUNNING = {'true' if require_running else 'false'};\n"
        )
        return header + PRELUDE + script

    def build_command(self, script: str, payload: Dict[str, Any], require_running: bool = True) -> List[str]:
        return [
            self.osascript, "-l", "JavaScript",
            "-e", self.build_source(script, require_running),
            json.dumps(payload, ensure_ascii=False),
        ]

    async def run(
        self,
        script: str,
        payload: Optional[Dict[str, Any]] = None,
        require_running: bool = True,
    ) -> Any:
        """Run a script and return its decoded JSON result (None if it printed nothing)."""
        cmd = self.build_command(script, payload or {}, require_running)

        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as exc:
            raise ThingsError(
                f"osascript not found ({self.osascript}); Things3 tools need macOS",
                code="osascript_missing",
            ) from exc

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), self.timeout)
        except asyncio.TimeoutError:
            proc.kill()
            await proc.wait()
            log.warning(f"osascript timed out after {self.timeout}s")
            raise ThingsTimeoutError(self.timeout)

        if proc.returncode != 0:
            message = extract_script_error(stderr.decode("utf-8", "replace"), proc.returncode)
            log.debug(f"osascript failed (status={proc.returncode}): {message}")
            raise ThingsError(message)

        output = stdout.decode("utf-8", "replace").strip()
        if not output:
            return None

        try:
            return json.loads(output)
        except json.JSONDecodeError as exc:
            raise ThingsError(f"Unexpected output from {self.app_name}: {output[:200]}") from exc
