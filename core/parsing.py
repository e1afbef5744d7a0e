# core/parsing.py
"""
Best-effort decoding of JSON objects out of model output.

Models often wrap the object we asked for in prose or code fences, so we pull
out the first balanced top-level ``{...}`` span and validate it against a
pydantic model. Failures come back as a ``Decoded`` with ``error`` set instead
of an exception, so callers can pick their own fallback.
"""
import json
from dataclasses import dataclass
from typing import Generic, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

T = TypeVar("T", bound=BaseModel)


@dataclass
class Decoded(Generic[T]):
    value: Optional[T] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.value is not None


def find_json_object(text: str) -> Optional[str]:
    """Return the first balanced ``{...}`` span in ``text`` (braces inside strings ignored)."""
    if not text:
        return None
    start = text.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for pos in range(start, len(text)):
            ch = text[pos]
            if in_string:
                if escaped:
                    escaped = False
                elif ch == "\\":
                    escaped = True
                elif ch == '"':
                    in_string = False
                continue
            if ch == '"':
                in_string = True
            elif ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
                if depth == 0:
                    return text[start:pos + 1]
        # unbalanced from this brace; try the next one
        start = text.find("{", start + 1)
    return None


def decode_json_object(text: str, model: Type[T]) -> Decoded[T]:
    span = find_json_object(text)
    if span is None:
        return Decoded(error="no JSON object found in completion")
    try:
        data = json.loads(span)
    except json.JSONDecodeError as exc:
        return Decoded(error=f"invalid JSON: {exc}")
    try:
        return Decoded(value=model.model_validate(data))
    except ValidationError as exc:
        return Decoded(error=f"unexpected shape: {exc.error_count()} validation error(s)")
