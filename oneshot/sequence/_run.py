"""
Login, then fetch users with the credential — four ways.

All strategies share one contract: stage 2 starts only after stage 1
settled Ok, and the first failure is the result.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum
from functools import partial
from typing import Protocol

from kungfu import LazyCoroResult, Ok, Error

from oneshot import bridge as B
from oneshot import stream as St
from oneshot._types import Outcome, Callback, Lazy
from oneshot.api import Credential, RecordList
from oneshot.context import ALWAYS_ALIVE, ContextHandle
from oneshot.sequence._stage import Progress, Stage, StageListener

logger = logging.getLogger(__name__)

# ═══════════════════════════════════════════════════════════════════════════════
# Collaborators
# ═══════════════════════════════════════════════════════════════════════════════


class CompletionAccounts(Protocol):
    def login(self, callback: Callback[Credential]) -> None: ...

    def fetch_users(self, credential: Credential, callback: Callback[RecordList]) -> None: ...


class NativeAccounts(Protocol):
    async def login(self) -> Outcome[Credential]: ...

    async def fetch_users(self, credential: Credential) -> Outcome[RecordList]: ...


class Strategy(Enum):
    CALLBACKS = "callbacks"
    STREAM = "stream"
    BRIDGE = "bridge"
    NATIVE = "native"


# ═══════════════════════════════════════════════════════════════════════════════
# (a) Completion handlers
# ═══════════════════════════════════════════════════════════════════════════════


type ProgressFactory = Callable[[], Progress]
"""Builds the Progress for one run."""


def via_callbacks(
    api: CompletionAccounts,
    on_done: Callable[[Outcome[RecordList]], None],
    *,
    context: ContextHandle = ALWAYS_ALIVE,
    new_progress: ProgressFactory = Progress,
) -> None:
    """Nested callbacks. `on_done` is called exactly once, on whichever thread finished."""
    progress = new_progress()

    def finish(outcome: Outcome[RecordList]) -> None:
        progress.finish(outcome)
        on_done(outcome)

    def after_login(outcome: Outcome[Credential]) -> None:
        match outcome:
            case Ok(credential):
                progress.advance(Stage.FETCHING)
                B.start(
                    partial(api.fetch_users, credential),
                    B.SettlementToken(finish, "fetch_users"),
                    context,
                )
            case Error(err):
                finish(Error(err))

    progress.advance(Stage.AUTHENTICATING)
    B.start(api.login, B.SettlementToken(after_login, "login"), context)


# ═══════════════════════════════════════════════════════════════════════════════
# (b) Single-value streams
# ═══════════════════════════════════════════════════════════════════════════════


def via_stream(
    api: CompletionAccounts,
    *,
    context: ContextHandle = ALWAYS_ALIVE,
    new_progress: ProgressFactory = Progress,
) -> St.Single[RecordList]:
    """just(()) -> login -> fetch_users, composed with flat_map, per subscription."""

    def chain() -> St.Single[RecordList]:
        progress = new_progress()

        def authenticate(_: None) -> St.Single[Credential]:
            progress.advance(Stage.AUTHENTICATING)
            return St.single(api.login, context=context, label="login")

        def fetch(credential: Credential) -> St.Single[RecordList]:
            progress.advance(Stage.FETCHING)
            return St.single(
                partial(api.fetch_users, credential),
                context=context,
                label="fetch_users",
            )

        return (
            St.Single.just(None)
            .flat_map(authenticate)
            .flat_map(fetch)
            .tap(
                on_success=lambda records: progress.finish(Ok(records)),
                on_failure=lambda error: progress.finish(Error(error)),
            )
        )

    return St.Single.defer(chain)


# ═══════════════════════════════════════════════════════════════════════════════
# (c) Structured concurrency — bridged callbacks and native coroutines
# ═══════════════════════════════════════════════════════════════════════════════


def via_bridge(
    api: CompletionAccounts,
    *,
    context: ContextHandle = ALWAYS_ALIVE,
    new_progress: ProgressFactory = Progress,
) -> Lazy[RecordList]:
    """Two bridged awaits chained with then(). Every await is a new run."""

    async def run() -> Outcome[RecordList]:
        progress = new_progress()

        def fetch(credential: Credential) -> Lazy[RecordList]:
            progress.advance(Stage.FETCHING)
            return B.bridged(api.fetch_users, context=context)(credential)

        progress.advance(Stage.AUTHENTICATING)
        outcome = await B.bridge(api.login, context=context, label="login").then(fetch)
        progress.finish(outcome)
        return outcome

    return LazyCoroResult(run)


def via_native(
    api: NativeAccounts,
    *,
    context: ContextHandle = ALWAYS_ALIVE,
    new_progress: ProgressFactory = Progress,
) -> Lazy[RecordList]:
    """Two native coroutine calls chained with then(). Every await is a new run."""

    async def run() -> Outcome[RecordList]:
        progress = new_progress()

        def fetch(credential: Credential) -> Lazy[RecordList]:
            progress.advance(Stage.FETCHING)
            return B.native(api.fetch_users, credential, context=context, label="fetch_users")

        progress.advance(Stage.AUTHENTICATING)
        outcome = await B.native(api.login, context=context, label="login").then(fetch)
        progress.finish(outcome)
        return outcome

    return LazyCoroResult(run)


# ═══════════════════════════════════════════════════════════════════════════════
# Sequencer — one entry point over every strategy
# ═══════════════════════════════════════════════════════════════════════════════


class Sequencer:
    """
    Runs login-then-fetch with a chosen strategy.

    Every run gets a fresh Progress; the latest is kept on `progress`.

    Example:
        sequencer = Sequencer(api, context=scope)
        match await sequencer.run(Strategy.STREAM):
            case Ok(records):
                ...
    """

    def __init__(
        self,
        api: CompletionAccounts | NativeAccounts,
        *,
        context: ContextHandle = ALWAYS_ALIVE,
        listener: StageListener | None = None,
    ) -> None:
        self._api = api
        self._context = context
        self._listener = listener
        self.progress = Progress(listener)

    def _new_progress(self) -> Progress:
        self.progress = Progress(self._listener)
        return self.progress

    async def run(self, strategy: Strategy = Strategy.BRIDGE) -> Outcome[RecordList]:
        api, context, new_progress = self._api, self._context, self._new_progress
        logger.debug("login-then-fetch via %s", strategy.value)
        match strategy:
            case Strategy.CALLBACKS:
                return await B.bridge(
                    lambda done: via_callbacks(
                        api, done, context=context, new_progress=new_progress
                    ),
                    label="login_then_fetch",
                )
            case Strategy.STREAM:
                return await via_stream(api, context=context, new_progress=new_progress)
            case Strategy.BRIDGE:
                return await via_bridge(api, context=context, new_progress=new_progress)
            case Strategy.NATIVE:
                return await via_native(api, context=context, new_progress=new_progress)


async def run_login_then_fetch(
    api: CompletionAccounts | NativeAccounts,
    *,
    strategy: Strategy = Strategy.BRIDGE,
    context: ContextHandle = ALWAYS_ALIVE,
) -> Outcome[RecordList]:
    """Authenticate, then fetch users with the credential. Returns the first failure."""
    return await Sequencer(api, context=context).run(strategy)


__all__ = (
    "CompletionAccounts",
    "NativeAccounts",
    "Strategy",
    "ProgressFactory",
    "via_callbacks",
    "via_stream",
    "via_bridge",
    "via_native",
    "Sequencer",
    "run_login_then_fetch",
)
