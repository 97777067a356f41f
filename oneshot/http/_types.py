"""
HTTP boundary types.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

from oneshot._types import Outcome, Callback

JSON_HEADERS: Mapping[str, str] = {"Content-Type": "application/json"}


@dataclass(frozen=True, slots=True)
class Request:
    """One HTTP request; the body is already encoded."""

    method: str
    target: str
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes | None = None

    @staticmethod
    def get(target: str, headers: Mapping[str, str] | None = None) -> Request:
        return Request("GET", target, {**JSON_HEADERS, **(headers or {})})

    @staticmethod
    def post_json(
        target: str,
        payload: Any,
        headers: Mapping[str, str] | None = None,
    ) -> Request:
        return Request(
            "POST",
            target,
            {**JSON_HEADERS, **(headers or {})},
            json.dumps(payload).encode(),
        )


class Transport(Protocol):
    """Completion-style client: reports the response body through a callback."""

    def send(self, request: Request, callback: Callback[bytes]) -> None:
        ...


class AsyncTransport(Protocol):
    """Native coroutine client."""

    async def send(self, request: Request) -> Outcome[bytes]:
        ...


__all__ = ("JSON_HEADERS", "Request", "Transport", "AsyncTransport")
