r"""Unit tests for the attempt sequence state machine."""

from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import Mock

from auntil.decider import ResultDecider
from auntil.manager import CallbackManager
from auntil.sequence import AttemptSequence, AttemptState
from tests.helpers import ManualScheduler

if TYPE_CHECKING:
    from collections.abc import Callable


def make_sequence(
    performer: Callable[..., None],
    scheduler: ManualScheduler,
    state: AttemptState,
    checker: Callable[..., bool] = lambda *results: results == (3,),
    max_calls: int = 7,
    wait_mult: float = 2.0,
) -> AttemptSequence:
    return AttemptSequence(
        performer=performer,
        decider=ResultDecider(checker, max_calls),
        callbacks=CallbackManager("test"),
        scheduler=scheduler,
        wait_mult=wait_mult,
        state=state,
    )


def test_attempt_state_defaults() -> None:
    """Test AttemptState starts with no rejected results."""
    state = AttemptState(args=(1, 2), wait=1.0)
    assert state.args == (1, 2)
    assert state.wait == 1.0
    assert state.calls == 0
    assert state.attempt == 0
    assert not state.completed
    assert not state.finished


def test_sequence_passes_args_and_completion(scheduler: ManualScheduler) -> None:
    """Test the performer receives the arguments then a callable."""
    performer = Mock()
    make_sequence(performer, scheduler, AttemptState(args=("a", 1), wait=1.0)).start()

    performer.assert_called_once()
    *args, completion = performer.call_args.args
    assert args == ["a", 1]
    assert callable(completion)


def test_sequence_state_after_rejections(scheduler: ManualScheduler) -> None:
    """Test calls and wait after each rejection."""
    state = AttemptState(args=(), wait=1.5)
    make_sequence(lambda next_: next_(0), scheduler, state, wait_mult=2.0).start()

    for k in range(1, 5):
        assert state.calls == k
        assert state.wait == 1.5 * 2.0**k
        assert scheduler.delays[-1] == 1.5 * 2.0 ** (k - 1)
        scheduler.run_next()
    assert state.attempt == 4


def test_sequence_finished_on_success(scheduler: ManualScheduler) -> None:
    """Test the state is finished once a result is accepted."""
    state = AttemptState(args=(), wait=1.0)
    make_sequence(lambda next_: next_(3), scheduler, state).start()
    assert state.finished
    assert state.calls == 0


def test_sequence_finished_on_exhaustion(scheduler: ManualScheduler) -> None:
    """Test the state is finished once max_calls results are rejected."""
    state = AttemptState(args=(), wait=1.0)
    make_sequence(lambda next_: next_(0), scheduler, state, max_calls=2).start()
    scheduler.run_all()
    assert state.finished
    assert state.calls == 2


def test_sequence_stale_completion_ignored(scheduler: ManualScheduler) -> None:
    """Test a completion from an earlier attempt does not count."""
    completions: list[Callable[..., None]] = []
    state = AttemptState(args=(), wait=1.0)
    make_sequence(completions.append, scheduler, state).start()
    completions[0](0)
    scheduler.run_next()

    completions[0](3)
    assert not state.finished
    assert state.calls == 1
