"""
Bridge — callback-to-awaitable adapter with exactly-once settlement.

    from oneshot import bridge as B

    outcome = await B.bridge(api.login, context=scope)
    users = await B.bridged(api.fetch_users)(credential)
    native = await B.native(async_api.login)
"""

from __future__ import annotations

from oneshot.bridge._token import (
    TokenState,
    SettlementToken,
    settlement_callback,
    normalize,
)
from oneshot.bridge._bridge import bridge, bridged, native, start, future_sink

__all__ = (
    "TokenState",
    "SettlementToken",
    "settlement_callback",
    "normalize",
    "bridge",
    "bridged",
    "native",
    "start",
    "future_sink",
)
