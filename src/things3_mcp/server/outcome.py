"""
Tool call outcomes — Success | DomainFailure, folded into one envelope

A handler either produced a value or failed. Both are normal tools/call
responses; only the envelope's isError flag differs.
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, Union


@dataclass(frozen=True)
class Success:
    value: Any


@dataclass(frozen=True)
class DomainFailure:
    message: str


Outcome = Union[Success, DomainFailure]


def failure_message(failure: Any) -> str:
    """Best-effort message for anything a handler failed with."""
    message = getattr(failure, "message", None)
    if isinstance(message, str):
        return message
    text = str(failure)
    if not text and isinstance(failure, BaseException):
        # e.g. a bare CancelledError()
        return type(failure).__name__
    return text


def serialize(value: Any) -> str:
    """
    Compact, deterministic JSON. Raises TypeError/ValueError on cycles,
    unserializable objects and NaN/Infinity.
    """
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, allow_nan=False)


def _text_block(value: Any) -> Dict[str, Any]:
    return {"type": "text", "text": serialize(value)}


def to_envelope(outcome: Outcome) -> Dict[str, Any]:
    """
    The tools/call result. A success carries the serialized value, a
    failure carries {"error": message} and isError: true.
    """
    if isinstance(outcome, Success):
        return {"content": [_text_block(outcome.value)]}
    return {"content": [_text_block({"error": outcome.message})], "isError": True}
