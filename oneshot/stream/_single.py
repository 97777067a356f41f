"""
Single — a cold stream that emits one value or one error.

Built on the same SettlementToken and settlement callback as the bridge.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import AsyncIterator, Callable, Generator
from dataclasses import dataclass
from typing import Any

from kungfu import LazyCoroResult, Ok, Error

from oneshot._types import Outcome, CompletionOp, Lazy
from oneshot.bridge import SettlementToken, start
from oneshot.bridge._bridge import describe
from oneshot.bridge._token import Sink
from oneshot.context import ALWAYS_ALIVE, ContextHandle
from oneshot.errors import FlowError, FlowErrors, FlowFailure

logger = logging.getLogger(__name__)

# ═══════════════════════════════════════════════════════════════════════════════
# Observer / Disposable
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Observer[T]:
    """Receiver of exactly one notification."""

    on_success: Callable[[T], None]
    on_failure: Callable[[FlowError], None]


class Disposable:
    """
    Subscription handle.

    dispose() is idempotent; a chained inner subscription is disposed with it.
    """

    __slots__ = ("_disposed", "_inner", "_lock")

    def __init__(self) -> None:
        self._disposed = False
        self._inner: Disposable | None = None
        self._lock = threading.Lock()

    @property
    def disposed(self) -> bool:
        return self._disposed

    def chain(self, inner: Disposable) -> None:
        with self._lock:
            disposed = self._disposed
            if not disposed:
                self._inner = inner
        if disposed:
            inner.dispose()

    def dispose(self) -> None:
        with self._lock:
            self._disposed = True
            inner, self._inner = self._inner, None
        if inner is not None:
            inner.dispose()


type Source[T] = Callable[[Observer[T], Disposable], None]


def _guarded[T](observer: Observer[T], disposable: Disposable, label: str) -> Observer[T]:
    """Drop notifications after disposal and after the first one."""
    delivered = threading.Event()

    def admit(kind: str) -> bool:
        if disposable.disposed:
            logger.debug("%s: %s after dispose, dropped", label, kind)
            return False
        if delivered.is_set():
            logger.error("%s: second %s notification, dropped", label, kind)
            return False
        delivered.set()
        return True

    def on_success(value: T) -> None:
        if admit("success"):
            observer.on_success(value)

    def on_failure(error: FlowError) -> None:
        if admit("failure"):
            observer.on_failure(error)

    return Observer(on_success, on_failure)


def _observer_sink[T](
    loop: asyncio.AbstractEventLoop | None,
    observer: Observer[T],
    label: str,
) -> Sink[T]:
    """Deliver an Outcome to `observer`, on `loop` when there is one."""

    def notify(outcome: Outcome[T]) -> None:
        match outcome:
            case Ok(value):
                observer.on_success(value)
            case Error(err):
                observer.on_failure(err)

    if loop is None:
        return notify

    def sink(outcome: Outcome[T]) -> None:
        try:
            loop.call_soon_threadsafe(notify, outcome)
        except RuntimeError:
            logger.warning("%s: event loop closed, outcome %r discarded", label, outcome)

    return sink


def _running_loop() -> asyncio.AbstractEventLoop | None:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


# ═══════════════════════════════════════════════════════════════════════════════
# Single
# ═══════════════════════════════════════════════════════════════════════════════


class Single[T]:
    """
    Cold single-value producer.

    Nothing runs until subscribe(); every subscription runs the source again.

    Example:
        from oneshot import stream as St

        users = (
            St.single(api.login, context=scope)
            .flat_map(lambda cred: St.single(partial(api.fetch_users, cred)))
        )
        disposable = users.subscribe(show_users, show_error)
    """

    __slots__ = ("_source", "label")

    def __init__(self, source: Source[T], label: str = "single") -> None:
        self._source = source
        self.label = label

    # ── constructors ──────────────────────────────────────────────────────────

    @staticmethod
    def just[V](value: V) -> Single[V]:
        return Single(lambda observer, _: observer.on_success(value), "just")

    @staticmethod
    def fail(error: FlowError) -> Single[Any]:
        return Single(lambda observer, _: observer.on_failure(error), "fail")

    @staticmethod
    def defer[V](factory: Callable[[], Single[V]]) -> Single[V]:
        """Build a new Single with factory() on every subscription."""

        def source(observer: Observer[V], disposable: Disposable) -> None:
            try:
                inner = factory()
            except Exception as exc:
                observer.on_failure(FlowErrors.operation_failed(exc))
                return
            disposable.chain(inner.subscribe(observer.on_success, observer.on_failure))

        return Single(source, "defer")

    # ── subscription ──────────────────────────────────────────────────────────

    def subscribe(
        self,
        on_success: Callable[[T], None],
        on_failure: Callable[[FlowError], None],
    ) -> Disposable:
        disposable = Disposable()
        self._source(
            _guarded(Observer(on_success, on_failure), disposable, self.label),
            disposable,
        )
        return disposable

    # ── operators ─────────────────────────────────────────────────────────────

    def map[U](self, f: Callable[[T], U]) -> Single[U]:
        """Transform the value. An exception from f becomes OPERATION_FAILED."""
        upstream = self._source

        def source(observer: Observer[U], disposable: Disposable) -> None:
            def on_success(value: T) -> None:
                try:
                    mapped = f(value)
                except Exception as exc:
                    observer.on_failure(FlowErrors.operation_failed(exc))
                    return
                observer.on_success(mapped)

            upstream(Observer(on_success, observer.on_failure), disposable)

        return Single(source, self.label)

    def tap(
        self,
        on_success: Callable[[T], None] | None = None,
        on_failure: Callable[[FlowError], None] | None = None,
    ) -> Single[T]:
        """Run side effects on the notification, then pass it on unchanged."""
        upstream = self._source

        def source(observer: Observer[T], disposable: Disposable) -> None:
            def success(value: T) -> None:
                if on_success is not None:
                    on_success(value)
                observer.on_success(value)

            def failure(error: FlowError) -> None:
                if on_failure is not None:
                    on_failure(error)
                observer.on_failure(error)

            upstream(Observer(success, failure), disposable)

        return Single(source, self.label)

    def flat_map[U](self, f: Callable[[T], Single[U]]) -> Single[U]:
        """
        Subscribe to f(value) once this Single succeeds.

        A failure skips f entirely. Disposing the outer subscription disposes
        the inner one.
        """
        upstream = self._source

        def source(observer: Observer[U], disposable: Disposable) -> None:
            def on_success(value: T) -> None:
                if disposable.disposed:
                    return
                try:
                    inner = f(value)
                except Exception as exc:
                    observer.on_failure(FlowErrors.operation_failed(exc))
                    return
                disposable.chain(inner.subscribe(observer.on_success, observer.on_failure))

            upstream(Observer(on_success, observer.on_failure), disposable)

        return Single(source, self.label)

    # ── async consumption ─────────────────────────────────────────────────────

    def to_result(self) -> Lazy[T]:
        """Await the single notification as an Outcome."""

        async def run() -> Outcome[T]:
            loop = asyncio.get_running_loop()
            future: asyncio.Future[Outcome[T]] = loop.create_future()

            def settle(outcome: Outcome[T]) -> None:
                if not future.done():
                    future.set_result(outcome)

            disposable = self.subscribe(
                lambda value: settle(Ok(value)),
                lambda error: settle(Error(error)),
            )
            try:
                return await future
            finally:
                disposable.dispose()

        return LazyCoroResult(run)

    def __await__(self) -> Generator[Any, None, Outcome[T]]:
        return self.to_result().__await__()

    def __aiter__(self) -> AsyncIterator[T]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[T]:
        match await self.to_result():
            case Ok(value):
                yield value
            case Error(err):
                raise FlowFailure(err)

    def __repr__(self) -> str:
        return f"Single({self.label!r})"


# ═══════════════════════════════════════════════════════════════════════════════
# single() — from a completion-style operation
# ═══════════════════════════════════════════════════════════════════════════════


def single[T](
    operation: CompletionOp[T],
    *,
    context: ContextHandle = ALWAYS_ALIVE,
    label: str | None = None,
) -> Single[T]:
    """
    Wrap a completion-style operation as a Single.

    Each subscription starts the operation once through a SettlementToken.
    Notifications go to the subscriber's event loop when subscribed inside
    one, otherwise to whichever thread fired the callback.
    """
    name = label or describe(operation)

    def source(observer: Observer[T], disposable: Disposable) -> None:
        token = SettlementToken(_observer_sink(_running_loop(), observer, name), name)
        start(operation, token, context)

    return Single(source, name)


__all__ = ("Observer", "Disposable", "Source", "Single", "single")
