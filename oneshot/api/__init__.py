"""
API — the two dependent account operations.

    from oneshot import api as A

    api, transport = A.connect()
    api.login(lambda outcome: ...)
"""

from __future__ import annotations

from oneshot.api._models import Credential, Record, RecordList, LoginReply, UsersPage
from oneshot.api._account import (
    AccountApi,
    AsyncAccountApi,
    login_request,
    users_request,
    decoded,
    connect,
    connect_async,
)

__all__ = (
    "Credential",
    "Record",
    "RecordList",
    "LoginReply",
    "UsersPage",
    "AccountApi",
    "AsyncAccountApi",
    "login_request",
    "users_request",
    "decoded",
    "connect",
    "connect_async",
)
