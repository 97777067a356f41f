"""
httpx-backed transports.

ThreadedTransport runs blocking requests on worker threads and calls back
from there; HttpxAsyncTransport awaits them on the event loop.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor

import httpx
from kungfu import Ok, Error

from oneshot._types import Outcome, Callback
from oneshot.errors import FlowErrors
from oneshot.http._types import Request

logger = logging.getLogger(__name__)


def read_response(request: Request, response: httpx.Response) -> Outcome[bytes]:
    """HTTP status >= 400 is a transport failure; otherwise the raw body."""
    if response.is_error:
        return Error(
            FlowErrors.transport(
                f"{request.method} {request.target} returned {response.status_code}",
                status=response.status_code,
            )
        )
    return Ok(response.content)


def transport_error(request: Request, exc: Exception) -> Outcome[bytes]:
    return Error(FlowErrors.transport(f"{request.method} {request.target}: {exc}", cause=exc))


# ═══════════════════════════════════════════════════════════════════════════════
# Completion-style transport
# ═══════════════════════════════════════════════════════════════════════════════


class ThreadedTransport:
    """
    Completion-style transport over httpx.Client.

    The callback fires exactly once per send(), on a worker thread. Any
    exception raised while making the request is reported as TRANSPORT.
    """

    def __init__(
        self,
        client: httpx.Client,
        max_workers: int = 4,
    ) -> None:
        self._client = client
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="oneshot-http",
        )

    def send(self, request: Request, callback: Callback[bytes]) -> None:
        logger.debug("%s %s queued", request.method, request.target)
        future = self._executor.submit(self._perform, request, callback)
        future.add_done_callback(self._report_crash)

    def _perform(self, request: Request, callback: Callback[bytes]) -> None:
        try:
            response = self._client.request(
                request.method,
                request.target,
                headers=dict(request.headers),
                content=request.body,
            )
        except httpx.HTTPError as exc:
            outcome = transport_error(request, exc)
        except Exception as exc:
            logger.warning("%s %s failed outside httpx: %r", request.method, request.target, exc)
            outcome = transport_error(request, exc)
        else:
            outcome = read_response(request, response)
        callback(outcome)

    @staticmethod
    def _report_crash(future: Future[None]) -> None:
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            logger.error("completion callback raised", exc_info=exc)

    def close(self) -> None:
        self._executor.shutdown(wait=True)
        self._client.close()

    def __enter__(self) -> ThreadedTransport:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


# ═══════════════════════════════════════════════════════════════════════════════
# Native transport
# ═══════════════════════════════════════════════════════════════════════════════


class HttpxAsyncTransport:
    """Native transport over httpx.AsyncClient."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def send(self, request: Request) -> Outcome[bytes]:
        logger.debug("%s %s", request.method, request.target)
        try:
            response = await self._client.request(
                request.method,
                request.target,
                headers=dict(request.headers),
                content=request.body,
            )
        except httpx.HTTPError as exc:
            return transport_error(request, exc)
        except Exception as exc:
            logger.warning("%s %s failed outside httpx: %r", request.method, request.target, exc)
            return transport_error(request, exc)
        return read_response(request, response)

    async def aclose(self) -> None:
        await self._client.aclose()


__all__ = (
    "ThreadedTransport",
    "HttpxAsyncTransport",
    "read_response",
    "transport_error",
)
