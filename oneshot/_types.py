"""
Core types for oneshot.

Re-exports from kungfu/combinators + the callback vocabulary.
"""

from __future__ import annotations

from collections.abc import Callable

# Re-export from kungfu
from kungfu import Result, Ok, Error, LazyCoroResult
from combinators import LCR

from oneshot.errors import FlowError

# ═══════════════════════════════════════════════════════════════════════════════
# Outcome — the only result shape
# ═══════════════════════════════════════════════════════════════════════════════

type Outcome[T] = Result[T, FlowError]
"""Success value or FlowError, produced exactly once."""

type Lazy[T] = LCR[T, FlowError]
"""Lazy async computation yielding an Outcome."""

# ═══════════════════════════════════════════════════════════════════════════════
# Completion-style operations
# ═══════════════════════════════════════════════════════════════════════════════

type Callback[T] = Callable[[Result[T, object]], None]
"""Receives the result of one unit of work. Must be called exactly once."""

type CompletionOp[T] = Callable[[Callback[T]], None]
"""Starts one unit of work and reports through the supplied callback."""

# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    # Re-exports from kungfu
    "Result",
    "Ok",
    "Error",
    "LazyCoroResult",
    # Aliases
    "Outcome",
    "Lazy",
    "Callback",
    "CompletionOp",
)
