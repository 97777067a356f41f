"""Tests for SettlementToken and the settlement callback."""

from __future__ import annotations

import threading

import pytest
from kungfu import Ok, Error

from oneshot import DoubleSettlementError, ErrorKind, FlowErrors, Scope
from oneshot.bridge import SettlementToken, TokenState, normalize, settlement_callback


class TestSettlementToken:
    def test_first_settle_reaches_sink(self):
        received = []
        token = SettlementToken(received.append, "op")

        token.settle(Ok(1))

        assert received == [Ok(1)]
        assert token.state is TokenState.SETTLED

    def test_second_settle_raises_and_keeps_first(self, caplog):
        received = []
        token = SettlementToken(received.append, "op")
        token.settle(Ok(1))

        with pytest.raises(DoubleSettlementError) as exc_info:
            token.settle(Ok(2))

        assert received == [Ok(1)]
        assert token.late_calls == 1
        assert exc_info.value.error.kind is ErrorKind.DOUBLE_SETTLEMENT
        assert "settled again" in caplog.text

    def test_concurrent_settles_deliver_once(self):
        received = []
        failures = []
        token = SettlementToken(received.append, "op")
        barrier = threading.Barrier(8)

        def race(n: int) -> None:
            barrier.wait()
            try:
                token.settle(Ok(n))
            except DoubleSettlementError as exc:
                failures.append(exc)

        threads = [threading.Thread(target=race, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(received) == 1
        assert len(failures) == 7
        assert token.late_calls == 7


class TestSettlementCallback:
    def test_alive_context_forwards_outcome(self):
        received = []
        callback = settlement_callback(SettlementToken(received.append, "op"), Scope())

        callback(Ok("tok"))

        assert received == [Ok("tok")]

    def test_closed_context_settles_context_gone(self):
        received = []
        scope = Scope("screen")
        callback = settlement_callback(SettlementToken(received.append, "op"), scope)
        scope.close()

        callback(Ok("tok"))

        [outcome] = received
        assert isinstance(outcome, Error)
        assert outcome.error.kind is ErrorKind.CONTEXT_GONE


class TestNormalize:
    def test_flow_error_is_forwarded_verbatim(self):
        error = FlowErrors.transport("down")

        result = normalize(Error(error))

        assert result.error is error

    def test_foreign_error_is_wrapped(self):
        cause = ValueError("bad")

        result = normalize(Error(cause))

        assert result.error.kind is ErrorKind.OPERATION_FAILED
        assert result.error.cause is cause

    def test_non_result_is_operation_failed(self):
        result = normalize("tok")

        assert result.error.kind is ErrorKind.OPERATION_FAILED
        assert isinstance(result.error.cause, TypeError)
