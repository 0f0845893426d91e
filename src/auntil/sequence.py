r"""Attempt/backoff state machine for one handler invocation.

Each call to a handler creates one ``AttemptSequence`` owning one
``AttemptState``. The sequence invokes the performer, evaluates the
result when the performer reports it, and either finishes or asks the
scheduler to start the next attempt later. Nothing in the state is shared
with other invocations of the same handler.
"""

from __future__ import annotations

__all__ = ["AttemptSequence", "AttemptState", "Completion"]

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

    from auntil.decider import ResultDecider
    from auntil.manager import CallbackManager
    from auntil.scheduler import BaseScheduler

logger: logging.Logger = logging.getLogger(__name__)


@dataclass
class AttemptState:
    """Mutable state of one retry sequence.

    Attributes:
        args: The arguments the handler was called with.
        wait: Delay in seconds before the next retry.
        calls: Number of rejected results so far.
        attempt: Index of the attempt in flight (0-indexed).
        completed: Whether the attempt in flight reported its result.
        finished: Whether the sequence reached success or exhaustion.
        checker_error: The last exception raised by the checker, if any.
    """

    args: tuple[Any, ...]
    wait: float
    calls: int = 0
    attempt: int = 0
    completed: bool = False
    finished: bool = False
    checker_error: Exception | None = None


class Completion:
    """Completion callback handed to the performer for one attempt.

    Calling it reports the result values of the attempt. ``fault`` reports
    an exception raised by the work the performer started, which is
    logged and counted as an empty result unless the attempt already
    reported.

    Args:
        sequence: The sequence the attempt belongs to.
        attempt: Index of the attempt (0-indexed).
    """

    def __init__(self, sequence: AttemptSequence, attempt: int) -> None:
        self._sequence = sequence
        self._attempt = attempt

    def __call__(self, *results: Any) -> None:
        self._sequence._complete(self._attempt, results)

    def fault(self, exc: Exception) -> None:
        self._sequence._fault(self._attempt, exc)


class AttemptSequence:
    """Runs the attempts of one handler invocation.

    Args:
        performer: The operation under retry. It receives the captured
            arguments followed by a completion callback.
        decider: Decides acceptance and exhaustion.
        callbacks: Writes log lines and invokes success/failure callbacks.
        scheduler: Delays the next attempt.
        wait_mult: Factor applied to the delay after each retry.
        state: The state owned by this sequence.
    """

    def __init__(
        self,
        performer: Callable[..., Any],
        decider: ResultDecider,
        callbacks: CallbackManager,
        scheduler: BaseScheduler,
        wait_mult: float,
        state: AttemptState,
    ) -> None:
        self.performer = performer
        self.decider = decider
        self.callbacks = callbacks
        self.scheduler = scheduler
        self.wait_mult = wait_mult
        self.state = state

    def start(self) -> None:
        """Invoke the performer for the first attempt."""
        self._invoke()

    def _invoke(self) -> None:
        state = self.state
        attempt = state.attempt
        state.completed = False
        logger.debug(f"{self.callbacks.name}: starting attempt {attempt + 1}")
        try:
            self.performer(*state.args, Completion(self, attempt))
        except Exception as exc:
            if exc is state.checker_error:
                raise
            self._fault(attempt, exc)

    def _is_stale(self, attempt: int) -> bool:
        state = self.state
        return state.finished or state.attempt != attempt or state.completed

    def _fault(self, attempt: int, exc: Exception) -> None:
        self.callbacks.on_exception(exc)
        # A fault raised after the attempt reported does not count again.
        if not self._is_stale(attempt):
            self._complete(attempt, ())

    def _complete(self, attempt: int, results: tuple[Any, ...]) -> None:
        state = self.state
        if self._is_stale(attempt):
            logger.warning(
                f"{self.callbacks.name}: ignoring extra completion for attempt {attempt + 1}"
            )
            return
        state.completed = True

        try:
            accepted = self.decider.accepts(results)
        except Exception as exc:
            state.checker_error = exc
            raise

        if accepted:
            state.finished = True
            self.callbacks.on_success(results)
            return

        state.calls += 1
        if not self.decider.should_retry(state.calls):
            state.finished = True
            self.callbacks.on_failure(state.calls, results)
            return

        wait = state.wait
        state.wait *= self.wait_mult
        self.callbacks.on_retry(state.calls, wait)
        self.scheduler.call_later(wait, self._retry)

    def _retry(self) -> None:
        self.state.attempt += 1
        self._invoke()
