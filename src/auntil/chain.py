r"""Fluent builder assembling a retry handler step by step.

``chain(checker)`` starts an immutable ``Chain``. Each of ``exec``,
``done``, ``fail`` and ``opts`` returns a new chain with one slot
replaced, and ``func()`` builds the handler through ``until()``.

Example:
    ```pycon
    >>> from auntil import chain
    >>> def add(a, b, next_):
    ...     next_(a + b)
    ...
    >>> handler = (
    ...     chain(lambda result: result == 3)
    ...     .exec(add)
    ...     .done(lambda result: print(f"success! {result}"))
    ...     .fail(lambda result: print(f"failure! {result}"))
    ...     .func()
    ... )
    >>> handler(1, 2)
    success! 3

    ```
"""

from __future__ import annotations

__all__ = ["Chain", "chain"]

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any

from auntil.exceptions import InvalidArgumentError
from auntil.handler import Handler, until
from auntil.validation import SIGNATURE, validate_checker

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from auntil.options import UntilOptions


@dataclass(frozen=True)
class Chain:
    """Immutable draft of a retry handler configuration.

    The checker is fixed when the chain is created. The other slots are
    filled by the chaining methods, in any order; setting a slot twice
    keeps the last value.

    Attributes:
        checker: Predicate deciding acceptance of a result.
        performer: Operation under retry, or ``None`` until ``exec`` is called.
        success: Optional callback invoked with the accepted values.
        failure: Optional callback invoked with the last rejected values.
        options: Optional ``UntilOptions`` or mapping of option values.
    """

    checker: Callable[..., Any]
    performer: Callable[..., Any] | None = None
    success: Callable[..., Any] | None = None
    failure: Callable[..., Any] | None = None
    options: UntilOptions | Mapping[str, Any] | None = None

    def __post_init__(self) -> None:
        validate_checker(self.checker)

    @property
    def is_complete(self) -> bool:
        r"""Whether a performer is set, so ``func()`` can build a handler."""
        return self.performer is not None

    def opts(self, options: UntilOptions | Mapping[str, Any] | None) -> Chain:
        """Return a chain with the options replaced."""
        return replace(self, options=options)

    def exec(self, performer: Callable[..., Any]) -> Chain:
        """Return a chain with the performer replaced."""
        return replace(self, performer=performer)

    def done(self, success: Callable[..., Any] | None) -> Chain:
        """Return a chain with the success callback replaced."""
        return replace(self, success=success)

    def fail(self, failure: Callable[..., Any] | None) -> Chain:
        """Return a chain with the failure callback replaced."""
        return replace(self, failure=failure)

    def func(self) -> Handler:
        """Build the handler.

        Returns:
            The handler created by ``until()`` from the chain slots.

        Raises:
            InvalidArgumentError: If no performer was set, or if any slot
                is invalid.
        """
        if self.performer is None:
            msg = f"Check params: performer is missing, call exec(performer) before func() - {SIGNATURE}"
            raise InvalidArgumentError(msg)
        return until(
            self.checker,
            self.performer,
            success=self.success,
            failure=self.failure,
            options=self.options,
        )


def chain(
    checker: Callable[..., Any],
    options: UntilOptions | Mapping[str, Any] | None = None,
) -> Chain:
    """Start a fluent builder for a retry handler.

    Args:
        checker: Predicate called with the result values. Only a return
            value of ``True`` accepts the result.
        options: Optional initial options, replaceable with ``opts``.

    Returns:
        A chain without performer.

    Raises:
        InvalidArgumentError: If ``checker`` is not callable.
    """
    return Chain(checker=checker, options=options)
