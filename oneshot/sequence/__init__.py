"""
Sequence — authenticate, then fetch with the credential.

    from oneshot import sequence as Q

    outcome = await Q.run_login_then_fetch(api, strategy=Q.Strategy.STREAM, context=scope)
"""

from __future__ import annotations

from oneshot.sequence._stage import Stage, TRANSITIONS, StageListener, Progress
from oneshot.sequence._run import (
    CompletionAccounts,
    NativeAccounts,
    Strategy,
    ProgressFactory,
    via_callbacks,
    via_stream,
    via_bridge,
    via_native,
    Sequencer,
    run_login_then_fetch,
)

__all__ = (
    "Stage",
    "TRANSITIONS",
    "StageListener",
    "Progress",
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
