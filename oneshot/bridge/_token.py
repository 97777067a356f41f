"""
SettlementToken — the right to resume a suspended caller, usable once.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from enum import Enum, auto

from kungfu import Ok, Error

from oneshot._types import Outcome, Callback
from oneshot.context import ContextHandle
from oneshot.errors import DoubleSettlementError, FlowError, FlowErrors

logger = logging.getLogger(__name__)

type Sink[T] = Callable[[Outcome[T]], None]


class TokenState(Enum):
    UNSETTLED = auto()
    SETTLED = auto()


# ═══════════════════════════════════════════════════════════════════════════════
# SettlementToken
# ═══════════════════════════════════════════════════════════════════════════════


class SettlementToken[T]:
    """
    Single-use capability that hands one Outcome to a sink.

    The state flip UNSETTLED -> SETTLED happens under a lock; whoever wins it
    owns delivery. Every later settle() raises DoubleSettlementError in the
    calling thread. The sink is released after delivery.
    """

    __slots__ = ("label", "_sink", "_lock", "_state", "_late_calls")

    def __init__(self, sink: Sink[T], label: str) -> None:
        self.label = label
        self._sink: Sink[T] | None = sink
        self._lock = threading.Lock()
        self._state = TokenState.UNSETTLED
        self._late_calls = 0

    @property
    def state(self) -> TokenState:
        return self._state

    @property
    def settled(self) -> bool:
        return self._state is TokenState.SETTLED

    @property
    def late_calls(self) -> int:
        """How many settle() calls arrived after the first one."""
        return self._late_calls

    def settle(self, outcome: Outcome[T]) -> None:
        with self._lock:
            if self._state is TokenState.SETTLED:
                self._late_calls += 1
                sink = None
            else:
                self._state = TokenState.SETTLED
                sink, self._sink = self._sink, None

        if sink is None:
            logger.error(
                "%s: settled again (extra call #%d), outcome %r rejected",
                self.label,
                self._late_calls,
                outcome,
            )
            raise DoubleSettlementError(self.label)

        logger.debug("%s: settled with %r", self.label, outcome)
        sink(outcome)

    def __repr__(self) -> str:
        return f"SettlementToken({self.label!r}, {self._state.name})"


# ═══════════════════════════════════════════════════════════════════════════════
# settlement_callback() — the callback handed to a completion-style operation
# ═══════════════════════════════════════════════════════════════════════════════


def settlement_callback[T](
    token: SettlementToken[T],
    context: ContextHandle,
) -> Callback[T]:
    """
    Build the callback that routes an operation's result into `token`.

    Liveness of `context` is read once per invocation, right before settling.
    """

    def on_result(result: object) -> None:
        if not context.is_alive():
            if isinstance(result, Ok):
                logger.warning("%s: context gone, discarding value", token.label)
            else:
                logger.warning("%s: context gone, discarding %r", token.label, result)
            token.settle(Error(FlowErrors.context_gone(token.label)))
            return
        token.settle(normalize(result))

    return on_result


def normalize[T](result: object) -> Outcome[T]:
    """Coerce whatever an operation reported into an Outcome."""
    match result:
        case Ok():
            return result  # type: ignore[return-value]
        case Error(FlowError() as err):
            return Error(err)
        case Error(other):
            return Error(FlowErrors.operation_failed(other))
        case _:
            return Error(
                FlowErrors.operation_failed(
                    TypeError(f"expected Ok/Error, got {type(result).__name__}")
                )
            )


__all__ = (
    "TokenState",
    "SettlementToken",
    "Sink",
    "settlement_callback",
    "normalize",
)
