"""
Error vocabulary — every Outcome failure is a FlowError.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

# ═══════════════════════════════════════════════════════════════════════════════
# Error Kinds
# ═══════════════════════════════════════════════════════════════════════════════


class ErrorKind(Enum):
    """Why an operation did not produce a value."""

    TRANSPORT = auto()
    DECODING = auto()
    OPERATION_FAILED = auto()
    CONTEXT_GONE = auto()
    DOUBLE_SETTLEMENT = auto()


@dataclass(frozen=True, slots=True)
class FlowError:
    """
    Failure payload carried by Error(...).

    `cause` keeps the original exception (or wrapped FlowError) when there is one.
    `status` is the HTTP status for transport failures that got a response.
    """

    kind: ErrorKind
    message: str
    cause: BaseException | FlowError | None = None
    status: int | None = None

    def __str__(self) -> str:
        if self.status is not None:
            return f"{self.kind.name}: {self.message} (status {self.status})"
        return f"{self.kind.name}: {self.message}"


class FlowErrors:
    @staticmethod
    def transport(
        msg: str,
        cause: BaseException | None = None,
        status: int | None = None,
    ) -> FlowError:
        return FlowError(ErrorKind.TRANSPORT, msg, cause, status)

    @staticmethod
    def decoding(msg: str, cause: BaseException | None = None) -> FlowError:
        return FlowError(ErrorKind.DECODING, msg, cause)

    @staticmethod
    def operation_failed(cause: object) -> FlowError:
        if isinstance(cause, BaseException | FlowError):
            return FlowError(ErrorKind.OPERATION_FAILED, str(cause), cause)
        return FlowError(ErrorKind.OPERATION_FAILED, repr(cause))

    @staticmethod
    def context_gone(label: str) -> FlowError:
        return FlowError(ErrorKind.CONTEXT_GONE, f"{label}: initiating context is gone")


# ═══════════════════════════════════════════════════════════════════════════════
# Exceptions — defects and iterator-form failures
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class FlowFailure(Exception):
    """Raised where a failure has to travel as an exception (async iteration)."""

    error: FlowError

    def __str__(self) -> str:
        return str(self.error)


class DoubleSettlementError(RuntimeError):
    """A completion callback was invoked more than once."""

    def __init__(self, label: str) -> None:
        super().__init__(f"{label}: callback invoked more than once")
        self.label = label
        self.error = FlowError(ErrorKind.DOUBLE_SETTLEMENT, str(self))


class IllegalTransition(RuntimeError):
    """A sequencer tried to move between stages that are not connected."""


__all__ = (
    "ErrorKind",
    "FlowError",
    "FlowErrors",
    "FlowFailure",
    "DoubleSettlementError",
    "IllegalTransition",
)
