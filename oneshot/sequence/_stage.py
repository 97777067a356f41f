"""
Stage machine for one login-then-fetch run.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from enum import Enum

from kungfu import Ok

from oneshot._types import Outcome
from oneshot.errors import IllegalTransition

logger = logging.getLogger(__name__)


class Stage(Enum):
    IDLE = "idle"
    AUTHENTICATING = "authenticating"
    FETCHING = "fetching"
    DONE = "done"
    FAILED = "failed"


TRANSITIONS: dict[Stage, frozenset[Stage]] = {
    Stage.IDLE: frozenset({Stage.AUTHENTICATING}),
    Stage.AUTHENTICATING: frozenset({Stage.FETCHING, Stage.FAILED}),
    Stage.FETCHING: frozenset({Stage.DONE, Stage.FAILED}),
    Stage.DONE: frozenset(),
    Stage.FAILED: frozenset(),
}

type StageListener = Callable[[Stage], None]


class Progress:
    """
    Stage history of a single run.

    Transitions may come from worker threads; they are serialized.
    """

    __slots__ = ("_history", "_lock", "_listener")

    def __init__(self, listener: StageListener | None = None) -> None:
        self._history: list[Stage] = [Stage.IDLE]
        self._lock = threading.Lock()
        self._listener = listener

    @property
    def stage(self) -> Stage:
        return self._history[-1]

    @property
    def history(self) -> tuple[Stage, ...]:
        return tuple(self._history)

    @property
    def finished(self) -> bool:
        return self.stage in (Stage.DONE, Stage.FAILED)

    def advance(self, to: Stage) -> None:
        with self._lock:
            current = self._history[-1]
            if to not in TRANSITIONS[current]:
                raise IllegalTransition(f"{current.value} -> {to.value}")
            self._history.append(to)
        logger.debug("stage %s -> %s", current.value, to.value)
        if self._listener is not None:
            self._listener(to)

    def finish(self, outcome: Outcome[object]) -> None:
        self.advance(Stage.DONE if isinstance(outcome, Ok) else Stage.FAILED)


__all__ = ("Stage", "TRANSITIONS", "StageListener", "Progress")
