"""
Typed decoding of response bodies.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from kungfu import Ok, Error
from pydantic import TypeAdapter, ValidationError

from oneshot._types import Outcome
from oneshot.errors import FlowErrors


@lru_cache(maxsize=64)
def _adapter(shape: Any) -> TypeAdapter[Any]:
    return TypeAdapter(shape)


def decode[T](raw: bytes, shape: type[T]) -> Outcome[T]:
    """
    Decode JSON bytes into `shape`.

    Never raises for bad input: malformed JSON and shape mismatches both
    come back as DECODING.
    """
    try:
        return Ok(_adapter(shape).validate_json(raw))
    except ValidationError as exc:
        name = getattr(shape, "__name__", repr(shape))
        return Error(FlowErrors.decoding(f"{name}: {exc.error_count()} validation error(s)", exc))


__all__ = ("decode",)
