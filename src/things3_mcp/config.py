"""
Things3 MCP settings

Every setting is a THINGS3_MCP_* variable. A value set in the environment
wins; otherwise <data dir>/config.env (written by `things3-mcp init`)
supplies it; otherwise the default below applies. The data dir itself
comes only from the environment (THINGS3_MCP_DATA_DIR, else ~/.things3-mcp).
"""

import os
from pathlib import Path
from typing import Callable, Dict, Optional, TypeVar

PREFIX = "THINGS3_MCP_"

T = TypeVar("T")


def _data_dir() -> Path:
    raw = os.environ.get(f"{PREFIX}DATA_DIR")
    return Path(raw).expanduser() if raw else Path.home() / ".things3-mcp"


def read_config_env(path: Path) -> Dict[str, str]:
    """
    Parse a config.env file: KEY=value lines, optional `export ` prefix,
    # comments, values optionally wrapped in matching quotes.
    Malformed lines are skipped.
    """
    values: Dict[str, str] = {}
    for line in path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("export "):
            line = line[len("export "):].lstrip()
        key, sep, value = line.partition("=")
        key = key.strip()
        if not sep or not key:
            continue
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
            value = value[1:-1]
        values[key] = value
    return values


def _load_config_env(path: Optional[Path] = None):
    """Copy config.env values into os.environ for keys not already set."""
    path = path or _data_dir() / "config.env"
    if not path.is_file():
        return
    for key, value in read_config_env(path).items():
        os.environ.setdefault(key, value)


def _env_flag(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_number(name: str, default: T, cast: Callable[[str], T]) -> T:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw.strip())
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


_load_config_env()


class Config:
    SERVER_NAME = "things3-mcp"
    SERVER_VERSION = "0.2.0"
    PROTOCOL_VERSION = "2024-11-05"

    DATA_DIR = _data_dir()
    LOG_DIR = DATA_DIR / "logs"

    # Files only: stdout carries the protocol
    LOG_LEVEL = os.environ.get(f"{PREFIX}LOG_LEVEL", "INFO").strip().upper()
    LOG_FILE = LOG_DIR / "things3-mcp.log"
    ERROR_LOG = LOG_DIR / "things3-mcp-errors.log"

    # When true, responses are written in request order
    ORDERED_RESPONSES = _env_flag(f"{PREFIX}ORDERED_RESPONSES", True)
    # Longest accepted stdin line; longer requests get an error reply
    MAX_MESSAGE_BYTES = _env_number(f"{PREFIX}MAX_MESSAGE_BYTES", 2**20, int)

    OSASCRIPT = os.environ.get(f"{PREFIX}OSASCRIPT", "osascript")
    SCRIPT_TIMEOUT = _env_number(f"{PREFIX}SCRIPT_TIMEOUT", 30.0, float)
    THINGS_APP = "Things3"

    @classmethod
    def ensure_dirs(cls):
        cls.LOG_DIR.mkdir(parents=True, exist_ok=True)
