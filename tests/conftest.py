"""Shared fixtures for the oneshot tests."""

from __future__ import annotations

import pytest
from kungfu import Error

from oneshot import FlowError, FlowErrors
from oneshot._types import Outcome
from oneshot.api import Credential
from oneshot.settings import Settings


@pytest.fixture
def transport_error() -> FlowError:
    return FlowErrors.transport("POST https://api.test/login: connection refused")


@pytest.fixture
def failed_login(transport_error: FlowError) -> Outcome[Credential]:
    return Error(transport_error)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        base_url="https://api.test/api",
        email="eve.holt@reqres.in",
        password="cityslicka",
        api_key="test-key",
        timeout_seconds=2.0,
        max_workers=2,
    )
