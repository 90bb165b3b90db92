# src/catchrun/state.py
#
"""
Defines the lifecycle state of a test executor across a batch run.
"""

import threading
from enum import Enum, auto

import structlog
from attrs import field, mutable

from catchrun.exceptions import ExecutorBusyError

# Logger specific to state management
log: structlog.stdlib.BoundLogger = structlog.get_logger("state")


class ExecutorState(Enum):
    """Enumeration of the lifecycle states of an executor."""

    STOPPED = auto()  # Idle, no batch in flight.
    RUNNING = auto()  # A batch is running.
    CANCELLING = auto()  # Cancel requested, honoured at the next test case boundary.
    CANCELLED = auto()  # The batch stopped early after a cancel request.


# Transitions allowed from each state. A batch may start again from STOPPED or
# CANCELLED, but nothing goes back to RUNNING once CANCELLING has been seen.
_ALLOWED_TRANSITIONS: dict[ExecutorState, frozenset[ExecutorState]] = {
    ExecutorState.STOPPED: frozenset({ExecutorState.RUNNING}),
    ExecutorState.RUNNING: frozenset({ExecutorState.CANCELLING, ExecutorState.STOPPED}),
    ExecutorState.CANCELLING: frozenset({ExecutorState.CANCELLED}),
    ExecutorState.CANCELLED: frozenset({ExecutorState.RUNNING}),
}

STATE_EMOJI_MAP = {
    ExecutorState.STOPPED: "⏹️",
    ExecutorState.RUNNING: "▶️",
    ExecutorState.CANCELLING: "⏳",
    ExecutorState.CANCELLED: "🛑",
}


@mutable(slots=True)
class ExecutorStateHolder:
    """
    Holds the state of one executor.

    Reads and writes go through a lock so that cancel() may be called from a
    signal handler or another thread while the batch loop is running.
    """

    _state: ExecutorState = field(default=ExecutorState.STOPPED, alias="state")
    _lock: threading.Lock = field(factory=threading.Lock, init=False, repr=False)

    @property
    def state(self) -> ExecutorState:
        with self._lock:
            return self._state

    def start_batch(self) -> None:
        """Moves to RUNNING, refusing to interleave two batches."""
        with self._lock:
            if ExecutorState.RUNNING not in _ALLOWED_TRANSITIONS[self._state]:
                raise ExecutorBusyError(f"Cannot start a batch while the executor is {self._state.name}")
            self._transition(ExecutorState.RUNNING)

    def request_cancel(self) -> bool:
        """
        Moves RUNNING to CANCELLING.

        Returns True when this call changed the state. Calls in any other state
        are no-ops, which makes repeated requests harmless.
        """
        with self._lock:
            if self._state is not ExecutorState.RUNNING:
                log.debug("Cancel request ignored", state=self._state.name)
                return False
            self._transition(ExecutorState.CANCELLING)
            return True

    def acknowledge_cancel(self) -> bool:
        """Moves CANCELLING to CANCELLED. Returns True if a cancel was pending."""
        with self._lock:
            if self._state is not ExecutorState.CANCELLING:
                return False
            self._transition(ExecutorState.CANCELLED)
            return True

    def finish_batch(self) -> ExecutorState:
        """Settles the state once the batch loop is over and returns it."""
        with self._lock:
            if self._state is ExecutorState.RUNNING:
                self._transition(ExecutorState.STOPPED)
            elif self._state is ExecutorState.CANCELLING:
                self._transition(ExecutorState.CANCELLED)
            return self._state

    def _transition(self, new_state: ExecutorState) -> None:
        # Callers hold the lock.
        old_state = self._state
        if new_state not in _ALLOWED_TRANSITIONS[old_state]:
            raise ValueError(f"Illegal executor transition {old_state.name} -> {new_state.name}")
        self._state = new_state
        log_func = log.info if new_state in (ExecutorState.CANCELLING, ExecutorState.CANCELLED) else log.debug
        log_func(
            "Executor state changed",
            old_state=old_state.name,
            new_state=new_state.name,
            emoji=STATE_EMOJI_MAP[new_state],
        )

# 🔼⚙️
