"""
Bridge — completion-style callbacks as a single awaitable.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from kungfu import LazyCoroResult, Ok, Error
from combinators import lift as L

from oneshot._types import Outcome, CompletionOp, Lazy
from oneshot.bridge._token import SettlementToken, Sink, normalize, settlement_callback
from oneshot.context import ALWAYS_ALIVE, ContextHandle
from oneshot.errors import FlowErrors

logger = logging.getLogger(__name__)

# ═══════════════════════════════════════════════════════════════════════════════
# start() — run an operation against a token
# ═══════════════════════════════════════════════════════════════════════════════


def start[T](
    operation: CompletionOp[T],
    token: SettlementToken[T],
    context: ContextHandle,
) -> None:
    """
    Invoke `operation` once with a callback bound to `token`.

    If the operation raises before the token settles, the exception becomes
    the outcome. Once settled, exceptions (DoubleSettlementError included)
    propagate to the caller.
    """
    try:
        operation(settlement_callback(token, context))
    except Exception as exc:
        if token.settled:
            raise
        logger.debug("%s: raised before settling: %r", token.label, exc)
        token.settle(Error(FlowErrors.operation_failed(exc)))


def future_sink[T](
    loop: asyncio.AbstractEventLoop,
    future: asyncio.Future[Outcome[T]],
    label: str,
) -> Sink[T]:
    """Deliver an Outcome into `future` from any thread."""

    def deliver(outcome: Outcome[T]) -> None:
        if future.done():
            logger.warning("%s: awaiter cancelled, outcome %r discarded", label, outcome)
            return
        future.set_result(outcome)

    def sink(outcome: Outcome[T]) -> None:
        try:
            loop.call_soon_threadsafe(deliver, outcome)
        except RuntimeError:
            logger.warning("%s: event loop closed, outcome %r discarded", label, outcome)

    return sink


def describe(operation: object) -> str:
    return getattr(operation, "__qualname__", None) or type(operation).__name__


# ═══════════════════════════════════════════════════════════════════════════════
# bridge() — Primary Constructor
# ═══════════════════════════════════════════════════════════════════════════════


def bridge[T](
    operation: CompletionOp[T],
    *,
    context: ContextHandle = ALWAYS_ALIVE,
    label: str | None = None,
) -> Lazy[T]:
    """
    Wrap a completion-style operation as an awaitable Outcome.

    Each await starts the operation once and suspends until its callback
    settles. The callback may fire on any thread.

    Args:
        operation: Called with one callback; must call it exactly once
        context: Checked when the result arrives; if gone, the outcome is CONTEXT_GONE
        label: Name used in logs and errors (defaults to the operation's name)

    Example:
        from oneshot import bridge as B

        match await B.bridge(api.login, context=scope):
            case Ok(credential):
                ...
            case Error(e):
                print(e.kind)
    """
    name = label or describe(operation)

    async def run() -> Outcome[T]:
        loop = asyncio.get_running_loop()
        future: asyncio.Future[Outcome[T]] = loop.create_future()
        token = SettlementToken(future_sink(loop, future, name), name)
        start(operation, token, context)
        return await future

    return LazyCoroResult(run)


def bridged[T](
    fn: Callable[..., None],
    *,
    context: ContextHandle = ALWAYS_ALIVE,
) -> Callable[..., Lazy[T]]:
    """
    Lift `fn(*args, callback)` into `fn(*args) -> awaitable Outcome`.

    Example:
        fetch_users = B.bridged(api.fetch_users, context=scope)
        users = await fetch_users(credential)
    """
    name = describe(fn)

    def wrapper(*args: Any) -> Lazy[T]:
        return bridge(lambda callback: fn(*args, callback), context=context, label=name)

    return wrapper


# ═══════════════════════════════════════════════════════════════════════════════
# native() — coroutine functions, same settlement rules
# ═══════════════════════════════════════════════════════════════════════════════


def native[T](
    fn: Callable[..., Awaitable[Outcome[T]]],
    *args: Any,
    context: ContextHandle = ALWAYS_ALIVE,
    label: str | None = None,
) -> Lazy[T]:
    """
    Call an Outcome-returning coroutine function as a lazy computation.

    Exceptions become OPERATION_FAILED. Liveness is checked once the call
    returns, exactly like a bridged callback.
    """
    name = label or describe(fn)
    call = L.catching_async(lambda: fn(*args), on_error=FlowErrors.operation_failed)

    async def run() -> Outcome[T]:
        match await call:
            case Ok(inner):
                result = normalize(inner)
            case Error(err):
                result = Error(err)
        if not context.is_alive():
            logger.warning("%s: context gone, discarding %r", name, result)
            return Error(FlowErrors.context_gone(name))
        return result

    return LazyCoroResult(run)


__all__ = ("bridge", "bridged", "native", "start", "future_sink", "describe")
