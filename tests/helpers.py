r"""Shared test helpers for retry handler tests."""

from __future__ import annotations

__all__ = ["ManualScheduler", "add", "add_sub"]

from typing import TYPE_CHECKING, Any

from auntil.scheduler import BaseScheduler

if TYPE_CHECKING:
    from collections.abc import Callable


class ManualScheduler(BaseScheduler):
    """Scheduler keeping callbacks pending until the test runs them.

    Attributes:
        delays: Every delay requested, in scheduling order.
        pending: Callbacks not run yet, in scheduling order.
    """

    def __init__(self) -> None:
        self.delays: list[float] = []
        self.pending: list[tuple[Callable[..., Any], tuple[Any, ...]]] = []

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> None:
        self.delays.append(delay)
        self.pending.append((callback, args))

    def run_next(self) -> None:
        callback, args = self.pending.pop(0)
        callback(*args)

    def run_all(self) -> None:
        while self.pending:
            self.run_next()


def add(a: int, b: int, next_: Callable[..., None]) -> None:
    next_(a + b)


def add_sub(a: int, b: int, next_: Callable[..., None]) -> None:
    next_(a + b, a - b)
