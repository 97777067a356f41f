"""
Account API — login and user listing, in completion and native form.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

import httpx
from kungfu import Ok, Error

from oneshot._types import Outcome, Callback
from oneshot.api._models import Credential, LoginReply, RecordList, UsersPage
from oneshot.http import (
    AsyncTransport,
    HttpxAsyncTransport,
    Request,
    ThreadedTransport,
    Transport,
    decode,
)
from oneshot.settings import Settings, get_settings

logger = logging.getLogger(__name__)

# ═══════════════════════════════════════════════════════════════════════════════
# Requests
# ═══════════════════════════════════════════════════════════════════════════════


def _headers(settings: Settings) -> dict[str, str]:
    if settings.api_key is None:
        return {}
    return {"x-api-key": settings.api_key.get_secret_value()}


def login_request(settings: Settings) -> Request:
    return Request.post_json(
        f"{settings.base_url.rstrip('/')}/login",
        {"email": settings.email, "password": settings.password.get_secret_value()},
        _headers(settings),
    )


def users_request(settings: Settings, credential: Credential) -> Request:
    return Request.get(
        f"{settings.base_url.rstrip('/')}/users",
        {**_headers(settings), "Authorization": f"Bearer {credential.token}"},
    )


def to_credential(reply: LoginReply) -> Credential:
    return Credential(reply.token)


def to_records(page: UsersPage) -> RecordList:
    return tuple(page.data)


def decoded[S, T](
    raw: Outcome[bytes],
    shape: type[S],
    convert: Callable[[S], T],
) -> Outcome[T]:
    """Decode a transport outcome; transport failures pass through untouched."""
    match raw:
        case Ok(body):
            return decode(body, shape).map(convert)
        case Error(err):
            return Error(err)


# ═══════════════════════════════════════════════════════════════════════════════
# Completion-style API
# ═══════════════════════════════════════════════════════════════════════════════


class AccountApi:
    """
    Callback-based account endpoints.

    Each method reports through its callback exactly once, on the
    transport's worker thread.
    """

    def __init__(self, transport: Transport, settings: Settings | None = None) -> None:
        self._transport = transport
        self._settings = settings or get_settings()

    def login(self, callback: Callback[Credential]) -> None:
        logger.debug("login as %s", self._settings.email)
        self._transport.send(
            login_request(self._settings),
            lambda raw: callback(decoded(raw, LoginReply, to_credential)),
        )

    def fetch_users(self, credential: Credential, callback: Callback[RecordList]) -> None:
        self._transport.send(
            users_request(self._settings, credential),
            lambda raw: callback(decoded(raw, UsersPage, to_records)),
        )


# ═══════════════════════════════════════════════════════════════════════════════
# Native API
# ═══════════════════════════════════════════════════════════════════════════════


class AsyncAccountApi:
    """Coroutine-based account endpoints."""

    def __init__(self, transport: AsyncTransport, settings: Settings | None = None) -> None:
        self._transport = transport
        self._settings = settings or get_settings()

    async def login(self) -> Outcome[Credential]:
        logger.debug("login as %s", self._settings.email)
        raw = await self._transport.send(login_request(self._settings))
        return decoded(raw, LoginReply, to_credential)

    async def fetch_users(self, credential: Credential) -> Outcome[RecordList]:
        raw = await self._transport.send(users_request(self._settings, credential))
        return decoded(raw, UsersPage, to_records)


# ═══════════════════════════════════════════════════════════════════════════════
# Factories
# ═══════════════════════════════════════════════════════════════════════════════


def connect(settings: Settings | None = None) -> tuple[AccountApi, ThreadedTransport]:
    """Completion-style API over a fresh httpx.Client. Close the transport when done."""
    settings = settings or get_settings()
    transport = ThreadedTransport(
        httpx.Client(timeout=settings.timeout_seconds),
        max_workers=settings.max_workers,
    )
    return AccountApi(transport, settings), transport


def connect_async(settings: Settings | None = None) -> tuple[AsyncAccountApi, HttpxAsyncTransport]:
    """Native API over a fresh httpx.AsyncClient. aclose() the transport when done."""
    settings = settings or get_settings()
    transport = HttpxAsyncTransport(httpx.AsyncClient(timeout=settings.timeout_seconds))
    return AsyncAccountApi(transport, settings), transport


__all__ = (
    "AccountApi",
    "AsyncAccountApi",
    "login_request",
    "users_request",
    "decoded",
    "connect",
    "connect_async",
)
