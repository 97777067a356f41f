"""
HTTP — request model, httpx transports and the typed decoder.
"""

from __future__ import annotations

from oneshot.http._types import JSON_HEADERS, Request, Transport, AsyncTransport
from oneshot.http._client import ThreadedTransport, HttpxAsyncTransport
from oneshot.http._decode import decode

__all__ = (
    "JSON_HEADERS",
    "Request",
    "Transport",
    "AsyncTransport",
    "ThreadedTransport",
    "HttpxAsyncTransport",
    "decode",
)
