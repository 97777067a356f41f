"""
Context handles — who started an operation, and are they still around.

The bridge asks `is_alive()` once, when a result arrives.
"""

from __future__ import annotations

import logging
import threading
import weakref
from typing import Protocol

logger = logging.getLogger(__name__)


class ContextHandle(Protocol):
    """Non-owning view of the initiating context."""

    def is_alive(self) -> bool:
        ...


class Scope:
    """
    Explicitly closed context.

    Example:
        scope = Scope("home-screen")
        result = await B.bridge(api.login, context=scope)
        scope.close()  # later callbacks settle with CONTEXT_GONE
    """

    __slots__ = ("name", "_closed")

    def __init__(self, name: str = "scope") -> None:
        self.name = name
        self._closed = threading.Event()

    def is_alive(self) -> bool:
        return not self._closed.is_set()

    def close(self) -> None:
        if not self._closed.is_set():
            logger.debug("scope %s closed", self.name)
        self._closed.set()

    def __enter__(self) -> Scope:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "alive" if self.is_alive() else "closed"
        return f"Scope({self.name!r}, {state})"


class WeakContext:
    """Alive for as long as the referenced object is."""

    __slots__ = ("_ref",)

    def __init__(self, owner: object) -> None:
        self._ref = weakref.ref(owner)

    def is_alive(self) -> bool:
        return self._ref() is not None


class _AlwaysAlive:
    __slots__ = ()

    def is_alive(self) -> bool:
        return True

    def __repr__(self) -> str:
        return "ALWAYS_ALIVE"


ALWAYS_ALIVE: ContextHandle = _AlwaysAlive()
"""Handle for callers with no owning context."""


__all__ = ("ContextHandle", "Scope", "WeakContext", "ALWAYS_ALIVE")
