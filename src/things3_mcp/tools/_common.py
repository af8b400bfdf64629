"""
Shared helpers for the Things3 tool modules

define() builds a ToolDefinition whose handler checks its arguments
against the tool's own input schema before doing any work. The checker
only understands the subset of JSON Schema the catalog uses: object
properties, required, additionalProperties, string/integer/boolean/array
types, enum, minimum/maximum, minItems and format "date".
"""

import datetime
from typing import Any, Awaitable, Callable, Dict, Iterable, List

from things3_mcp.errors import ToolArgumentError
from things3_mcp.server.registry import ToolDefinition

WHEN_KEYWORDS = ("today", "anytime", "someday")

ID = {"type": "string", "description": "Things3 item ID"}
IDS = {
    "type": "array",
    "items": {"type": "string"},
    "minItems": 1,
    "maxItems": 100,
    "description": "Things3 to-do IDs",
}
TITLE = {"type": "string", "description": "Title"}
NOTES = {"type": "string", "description": "Notes (plain text or Markdown)"}
TAGS = {"type": "array", "items": {"type": "string"}, "description": "Tag names"}
WHEN = {
    "type": "string",
    "description": "Schedule: 'today', 'anytime', 'someday' or a date (YYYY-MM-DD)",
}
DEADLINE = {"type": "string", "format": "date", "description": "Deadline (YYYY-MM-DD)"}


def object_schema(properties: Dict[str, Any], required: Iterable[str] = ()) -> Dict[str, Any]:
    schema = {
        "type": "object",
        "properties": properties,
        "additionalProperties": False,
    }
    required = list(required)
    if required:
        schema["required"] = required
    return schema


def _is_date(value: str) -> bool:
    try:
        datetime.date.fromisoformat(value)
    except ValueError:
        return False
    return True


def _check_value(key: str, value: Any, spec: Dict[str, Any]):
    kind = spec.get("type")

    if kind == "string":
        if not isinstance(value, str):
            raise ToolArgumentError(f"'{key}' must be a string")
        if spec.get("format") == "date" and not _is_date(value):
            raise ToolArgumentError(f"'{key}' must be a date in YYYY-MM-DD format")
    elif kind == "integer":
        if isinstance(value, bool) or not isinstance(value, int):
            raise ToolArgumentError(f"'{key}' must be an integer")
        if "minimum" in spec and value < spec["minimum"]:
            raise ToolArgumentError(f"'{key}' must be >= {spec['minimum']}")
        if "maximum" in spec and value > spec["maximum"]:
            raise ToolArgumentError(f"'{key}' must be <= {spec['maximum']}")
    elif kind == "boolean":
        if not isinstance(value, bool):
            raise ToolArgumentError(f"'{key}' must be a boolean")
    elif kind == "array":
        if not isinstance(value, list):
            raise ToolArgumentError(f"'{key}' must be an array")
        if len(value) < spec.get("minItems", 0):
            raise ToolArgumentError(f"'{key}' needs at least {spec['minItems']} item(s)")
        if "maxItems" in spec and len(value) > spec["maxItems"]:
            raise ToolArgumentError(f"'{key}' accepts at most {spec['maxItems']} items")
        items = spec.get("items")
        if items:
            for index, item in enumerate(value):
                _check_value(f"{key}[{index}]", item, items)

    if "enum" in spec and value not in spec["enum"]:
        raise ToolArgumentError(f"'{key}' must be one of: {', '.join(spec['enum'])}")


def check_arguments(args: Dict[str, Any], schema: Dict[str, Any]) -> Dict[str, Any]:
    """Validate `args` against `schema`; returns a copy with defaults filled in."""
    properties = schema.get("properties", {})

    missing = [key for key in schema.get("required", []) if args.get(key) is None]
    if missing:
        raise ToolArgumentError(f"Missing required argument(s): {', '.join(missing)}")

    if schema.get("additionalProperties") is False:
        unknown = sorted(set(args) - set(properties))
        if unknown:
            raise ToolArgumentError(f"Unknown argument(s): {', '.join(unknown)}")

    checked = {}
    for key, spec in properties.items():
        value = args.get(key)
        if value is None:
            if "default" in spec:
                checked[key] = spec["default"]
            continue
        _check_value(key, value, spec)
        checked[key] = value
    return checked


def check_when(args: Dict[str, Any]):
    when = args.get("when")
    if when is not None and when not in WHEN_KEYWORDS and not _is_date(when):
        raise ToolArgumentError(
            "'when' must be 'today', 'anytime', 'someday' or a date in YYYY-MM-DD format"
        )


def require_one_of(args: Dict[str, Any], keys: List[str]):
    present = [key for key in keys if key in args]
    if not present:
        raise ToolArgumentError(f"Provide one of: {', '.join(keys)}")
    if len(present) > 1:
        raise ToolArgumentError(f"Provide only one of: {', '.join(present)}")


def define(
    name: str,
    description: str,
    properties: Dict[str, Any],
    handler: Callable[[Dict[str, Any]], Awaitable[Any]],
    required: Iterable[str] = (),
) -> ToolDefinition:
    schema = object_schema(properties, required)

    async def checked_handler(args: Dict[str, Any]) -> Any:
        return await handler(check_arguments(args, schema))

    return ToolDefinition(
        name=name,
        description=description,
        input_schema=schema,
        handler=checked_handler,
    )
