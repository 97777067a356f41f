"""Tests for the httpx transports, decoder and account API."""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest
from kungfu import Ok, Error
from pydantic import SecretStr

from oneshot import api as A
from oneshot import bridge as B
from oneshot import http as H
from oneshot import sequence as Q
from oneshot import ErrorKind

USERS_BODY = {
    "page": 1,
    "per_page": 6,
    "total": 12,
    "total_pages": 2,
    "data": [
        {
            "id": 1,
            "email": "george.bluth@reqres.in",
            "first_name": "George",
            "last_name": "Bluth",
            "avatar": "https://reqres.in/img/faces/1-image.jpg",
        },
        {
            "id": 2,
            "email": "janet.weaver@reqres.in",
            "first_name": "Janet",
            "last_name": "Weaver",
            "avatar": "https://reqres.in/img/faces/2-image.jpg",
        },
    ],
}


class FakeServer:
    """httpx.MockTransport handler with per-path responses and a request log."""

    def __init__(self, responses: dict[str, httpx.Response]) -> None:
        self.responses = responses
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responses[request.url.path]

    @property
    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]


def reqres(login: httpx.Response | None = None, users: httpx.Response | None = None) -> FakeServer:
    return FakeServer({
        "/api/login": login or httpx.Response(200, json={"token": "QpwL5tke4Pnpja7X4"}),
        "/api/users": users or httpx.Response(200, json=USERS_BODY),
    })


def completion_api(server: FakeServer, settings) -> tuple[A.AccountApi, H.ThreadedTransport]:
    transport = H.ThreadedTransport(httpx.Client(transport=httpx.MockTransport(server)), max_workers=1)
    return A.AccountApi(transport, settings), transport


def native_api(server: FakeServer, settings) -> A.AsyncAccountApi:
    client = httpx.AsyncClient(transport=httpx.MockTransport(server))
    return A.AsyncAccountApi(H.HttpxAsyncTransport(client), settings)


class TestDecode:
    def test_login_reply(self):
        assert H.decode(b'{"token": "tok123", "extra": 1}', A.LoginReply) == Ok(A.LoginReply("tok123"))

    def test_users_page_ignores_paging_fields(self):
        result = H.decode(json.dumps(USERS_BODY).encode(), A.UsersPage)

        match result:
            case Ok(page):
                assert [r.first_name for r in page.data] == ["George", "Janet"]
            case Error(e):
                pytest.fail(str(e))

    @pytest.mark.parametrize(
        "raw",
        [b"", b"not json", b'{"token": ""}', b'{"token": 42}', b'{"error": "Missing password"}'],
    )
    def test_bad_login_bodies_are_decoding_errors(self, raw):
        result = H.decode(raw, A.LoginReply)

        assert result.error.kind is ErrorKind.DECODING

    def test_record_missing_field(self):
        body = {"data": [{"id": 1, "email": "x@y.z"}]}

        result = H.decode(json.dumps(body).encode(), A.UsersPage)

        assert result.error.kind is ErrorKind.DECODING


class TestRequests:
    def test_login_request(self, settings):
        request = A.login_request(settings)

        assert request.method == "POST"
        assert request.target == "https://api.test/api/login"
        assert request.headers["Content-Type"] == "application/json"
        assert request.headers["x-api-key"] == "test-key"
        assert json.loads(request.body) == {"email": "eve.holt@reqres.in", "password": "cityslicka"}

    def test_users_request_carries_credential(self, settings):
        request = A.users_request(settings, A.Credential("tok123"))

        assert request.method == "GET"
        assert request.target == "https://api.test/api/users"
        assert request.headers["Authorization"] == "Bearer tok123"
        assert request.body is None

    def test_credential_repr_hides_token(self):
        assert "tok123" not in repr(A.Credential("tok123"))


class TestThreadedTransport:
    @pytest.mark.asyncio()
    async def test_body_on_success(self, settings):
        server = reqres()
        with H.ThreadedTransport(httpx.Client(transport=httpx.MockTransport(server))) as transport:
            result = await B.bridge(lambda cb: transport.send(A.login_request(settings), cb))

        assert json.loads(result.value) == {"token": "QpwL5tke4Pnpja7X4"}

    @pytest.mark.asyncio()
    async def test_error_status_is_transport_failure(self, settings):
        server = reqres(login=httpx.Response(400, json={"error": "Missing password"}))
        with H.ThreadedTransport(httpx.Client(transport=httpx.MockTransport(server))) as transport:
            result = await B.bridge(lambda cb: transport.send(A.login_request(settings), cb))

        assert result.error.kind is ErrorKind.TRANSPORT
        assert result.error.status == 400

    @pytest.mark.asyncio()
    async def test_connection_error_is_transport_failure(self, settings):
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with H.ThreadedTransport(httpx.Client(transport=httpx.MockTransport(refuse))) as transport:
            result = await B.bridge(lambda cb: transport.send(A.login_request(settings), cb))

        assert result.error.kind is ErrorKind.TRANSPORT
        assert isinstance(result.error.cause, httpx.ConnectError)

    @pytest.mark.asyncio()
    async def test_unexpected_handler_error_is_transport_failure(self, settings):
        def explode(request: httpx.Request) -> httpx.Response:
            raise ValueError("handler blew up")

        with H.ThreadedTransport(httpx.Client(transport=httpx.MockTransport(explode))) as transport:
            result = await asyncio.wait_for(
                B.bridge(lambda cb: transport.send(A.login_request(settings), cb)),
                timeout=1,
            )

        assert result.error.kind is ErrorKind.TRANSPORT
        assert isinstance(result.error.cause, ValueError)

    @pytest.mark.asyncio()
    async def test_non_ascii_api_key_fails_instead_of_hanging(self, settings):
        settings = settings.model_copy(update={"api_key": SecretStr("clé")})
        server = reqres()
        api, transport = completion_api(server, settings)
        try:
            result = await asyncio.wait_for(
                Q.run_login_then_fetch(api, strategy=Q.Strategy.BRIDGE),
                timeout=1,
            )
        finally:
            transport.close()

        assert result.error.kind is ErrorKind.TRANSPORT
        assert server.requests == []


class TestAsyncTransport:
    @pytest.mark.asyncio()
    async def test_error_status_is_transport_failure(self, settings):
        server = reqres(users=httpx.Response(401, json={"error": "Missing API key"}))
        api = native_api(server, settings)

        result = await api.fetch_users(A.Credential("tok123"))

        assert result.error.kind is ErrorKind.TRANSPORT
        assert result.error.status == 401

    @pytest.mark.asyncio()
    async def test_unexpected_handler_error_is_transport_failure(self, settings):
        def explode(request: httpx.Request) -> httpx.Response:
            raise ValueError("handler blew up")

        result = await native_api(explode, settings).login()

        assert result.error.kind is ErrorKind.TRANSPORT
        assert isinstance(result.error.cause, ValueError)


class TestAccountApiEndToEnd:
    @pytest.mark.asyncio()
    @pytest.mark.parametrize(
        "strategy",
        [Q.Strategy.CALLBACKS, Q.Strategy.STREAM, Q.Strategy.BRIDGE],
        ids=lambda s: s.value,
    )
    async def test_completion_strategies(self, strategy, settings):
        server = reqres()
        api, transport = completion_api(server, settings)
        try:
            result = await Q.run_login_then_fetch(api, strategy=strategy)
        finally:
            transport.close()

        assert [r.email for r in result.value] == ["george.bluth@reqres.in", "janet.weaver@reqres.in"]
        assert server.paths == ["/api/login", "/api/users"]
        assert server.requests[1].headers["Authorization"] == "Bearer QpwL5tke4Pnpja7X4"
        assert server.requests[1].headers["x-api-key"] == "test-key"

    @pytest.mark.asyncio()
    async def test_native_strategy(self, settings):
        server = reqres()

        result = await Q.run_login_then_fetch(native_api(server, settings), strategy=Q.Strategy.NATIVE)

        assert len(result.value) == 2
        assert server.paths == ["/api/login", "/api/users"]

    @pytest.mark.asyncio()
    @pytest.mark.parametrize("strategy", list(Q.Strategy), ids=lambda s: s.value)
    async def test_undecodable_login_stops_before_fetch(self, strategy, settings):
        server = reqres(login=httpx.Response(200, content=b'{"unexpected": true}'))
        if strategy is Q.Strategy.NATIVE:
            api, transport = native_api(server, settings), None
        else:
            api, transport = completion_api(server, settings)
        try:
            result = await Q.run_login_then_fetch(api, strategy=strategy)
        finally:
            if transport is not None:
                transport.close()

        assert result.error.kind is ErrorKind.DECODING
        assert server.paths == ["/api/login"]
