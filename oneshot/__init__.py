"""
oneshot — exactly-once bridging between callbacks, streams and coroutines.

    from oneshot import bridge as B     # Callback -> awaitable
    from oneshot import stream as St    # Callback -> single-value stream
    from oneshot import sequence as Q   # Login, then fetch
"""

from oneshot import bridge
from oneshot import stream
from oneshot import sequence
from oneshot import api
from oneshot import http
from oneshot._types import (
    Outcome,
    Lazy,
    Callback,
    CompletionOp,
)
from oneshot.context import ContextHandle, Scope, WeakContext, ALWAYS_ALIVE
from oneshot.errors import (
    ErrorKind,
    FlowError,
    FlowErrors,
    FlowFailure,
    DoubleSettlementError,
    IllegalTransition,
)

__version__ = "0.1.0"

__all__ = (
    "bridge",
    "stream",
    "sequence",
    "api",
    "http",
    "Outcome",
    "Lazy",
    "Callback",
    "CompletionOp",
    "ContextHandle",
    "Scope",
    "WeakContext",
    "ALWAYS_ALIVE",
    "ErrorKind",
    "FlowError",
    "FlowErrors",
    "FlowFailure",
    "DoubleSettlementError",
    "IllegalTransition",
)
