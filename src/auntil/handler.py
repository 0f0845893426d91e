r"""Retry engine building reusable retry handlers.

This module provides ``until()``, which turns a checker and a
callback-style performer into a ``Handler``. Each call to the handler
starts an independent attempt/backoff sequence and returns immediately;
outcomes are reported through the optional success and failure callbacks
and the optional logger.

Example:
    ```pycon
    >>> from auntil import until
    >>> def add(a, b, next_):
    ...     next_(a + b)
    ...
    >>> handler = until(
    ...     lambda result: result == 3,
    ...     add,
    ...     success=lambda result: print(f"success! {result}"),
    ...     failure=lambda result: print(f"failure! {result}"),
    ... )
    >>> handler(1, 2)
    success! 3

    ```
"""

from __future__ import annotations

__all__ = ["Handler", "until"]

import logging
from typing import TYPE_CHECKING, Any

from auntil.decider import ResultDecider
from auntil.manager import CallbackManager
from auntil.options import coerce_options, resolve_name
from auntil.scheduler import DefaultScheduler
from auntil.sequence import AttemptSequence, AttemptState
from auntil.validation import validate_callback, validate_checker, validate_performer

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from auntil.options import UntilOptions
    from auntil.scheduler import BaseScheduler

logger: logging.Logger = logging.getLogger(__name__)


class Handler:
    """Callable starting one retry sequence per call.

    The configuration is fixed when the handler is created. Calling the
    handler with any positional arguments invokes the performer with
    those arguments plus a completion callback, and retries with
    geometric backoff until the checker returns ``True`` or ``max_calls``
    results were rejected.

    Args:
        checker: Predicate called with the result values. Only a return
            value of ``True`` accepts the result.
        performer: Operation under retry. It must eventually call the
            completion callback exactly once with zero or more values,
            or raise synchronously.
        success: Optional callback invoked with the accepted values.
        failure: Optional callback invoked with the last rejected values
            when the sequence is exhausted.
        options: Optional ``UntilOptions`` or mapping of option values.

    Raises:
        InvalidArgumentError: If an argument is not callable or the
            options are invalid.
        ValueError: If ``wait_secs`` or ``wait_mult`` is negative.
    """

    def __init__(
        self,
        checker: Callable[..., Any],
        performer: Callable[..., Any],
        success: Callable[..., Any] | None = None,
        failure: Callable[..., Any] | None = None,
        options: UntilOptions | Mapping[str, Any] | None = None,
    ) -> None:
        validate_checker(checker)
        validate_performer(performer)
        validate_callback("success", success)
        validate_callback("failure", failure)

        self._checker = checker
        self._performer = performer
        self._options = coerce_options(options)
        self._name = resolve_name(self._options, performer)
        self._decider = ResultDecider(checker, self._options.max_calls)
        self._callbacks = CallbackManager(
            name=self._name,
            logger=self._options.logger,
            success=success,
            failure=failure,
        )
        self._scheduler: BaseScheduler = (
            self._options.scheduler if self._options.scheduler is not None else DefaultScheduler()
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(name={self._name!r}, options={self._options!r})"

    @property
    def checker(self) -> Callable[..., Any]:
        return self._checker

    @property
    def performer(self) -> Callable[..., Any]:
        return self._performer

    @property
    def name(self) -> str:
        r"""The label used in log lines."""
        return self._name

    @property
    def options(self) -> UntilOptions:
        r"""The options the handler was created with."""
        return self._options

    def __call__(self, *args: Any) -> None:
        """Start a retry sequence.

        Args:
            *args: Arguments passed to the performer before the
                completion callback.
        """
        state = AttemptState(args=args, wait=self._options.wait_secs)
        logger.debug(f"{self._name}: starting sequence with {len(args)} argument(s)")
        AttemptSequence(
            performer=self._performer,
            decider=self._decider,
            callbacks=self._callbacks,
            scheduler=self._scheduler,
            wait_mult=self._options.wait_mult,
            state=state,
        ).start()


def until(
    checker: Callable[..., Any],
    performer: Callable[..., Any],
    success: Callable[..., Any] | None = None,
    failure: Callable[..., Any] | None = None,
    options: UntilOptions | Mapping[str, Any] | None = None,
) -> Handler:
    """Create a handler calling ``performer`` until ``checker`` accepts
    the result.

    Args:
        checker: Predicate called with the result values. Only a return
            value of ``True`` accepts the result.
        performer: Operation under retry, called with the handler
            arguments followed by a completion callback.
        success: Optional callback invoked with the accepted values.
        failure: Optional callback invoked with the last rejected values
            when the sequence is exhausted.
        options: Optional ``UntilOptions`` or mapping with the keys
            ``name``, ``logger``, ``wait_secs`` (``waitSecs``),
            ``wait_mult`` (``waitMult``), ``max_calls`` (``maxCalls``)
            and ``scheduler``.

    Returns:
        The handler.

    Raises:
        InvalidArgumentError: If an argument is not callable or the
            options are invalid.
        ValueError: If ``wait_secs`` or ``wait_mult`` is negative.

    Example:
        ```pycon
        >>> from auntil import until
        >>> handler = until(
        ...     lambda add, sub: add == 3 and sub == 1,
        ...     lambda a, b, next_: next_(a + b, a - b),
        ...     options={"waitSecs": 2, "waitMult": 1, "maxCalls": 3},
        ... )
        >>> handler.options.max_calls
        3

        ```
    """
    return Handler(checker, performer, success=success, failure=failure, options=options)
