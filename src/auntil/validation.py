r"""Argument validation utilities for handler construction.

This module provides validation functions that check the callables and
the numeric options used to build a retry handler, so invalid
configurations fail when the handler is created rather than while it
runs.
"""

from __future__ import annotations

__all__ = [
    "SIGNATURE",
    "validate_callback",
    "validate_checker",
    "validate_performer",
    "validate_wait_params",
]

from typing import Any

from auntil.exceptions import InvalidArgumentError

# Call signature reported when the arguments of ``until()`` are invalid
SIGNATURE = "until(checker, performer, success=None, failure=None, options=None)"


def validate_checker(checker: Any) -> None:
    """Validate the checker predicate.

    Args:
        checker: The predicate deciding whether a result is accepted.

    Raises:
        InvalidArgumentError: If ``checker`` is not callable.

    Example:
        ```pycon
        >>> from auntil.validation import validate_checker
        >>> validate_checker(lambda result: result == 3)
        >>> validate_checker(None)  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        auntil.exceptions.InvalidArgumentError: Check params: checker must be callable ...

        ```
    """
    if not callable(checker):
        msg = f"Check params: checker must be callable, got {checker!r} - {SIGNATURE}"
        raise InvalidArgumentError(msg)


def validate_performer(performer: Any) -> None:
    """Validate the performer.

    Args:
        performer: The operation under retry.

    Raises:
        InvalidArgumentError: If ``performer`` is not callable.
    """
    if not callable(performer):
        msg = f"Check params: performer must be callable, got {performer!r} - {SIGNATURE}"
        raise InvalidArgumentError(msg)


def validate_callback(name: str, callback: Any) -> None:
    """Validate an optional success or failure callback.

    Args:
        name: The parameter name, used in the error message.
        callback: The callback to validate. ``None`` is accepted.

    Raises:
        InvalidArgumentError: If ``callback`` is neither ``None`` nor callable.
    """
    if callback is not None and not callable(callback):
        msg = f"Check params: {name} must be callable or None, got {callback!r} - {SIGNATURE}"
        raise InvalidArgumentError(msg)


def validate_wait_params(wait_secs: float, wait_mult: float) -> None:
    """Validate the backoff parameters.

    Args:
        wait_secs: Initial delay in seconds before the first retry.
            Must be >= 0.
        wait_mult: Factor applied to the delay after each retry.
            Must be >= 0.

    Raises:
        ValueError: If ``wait_secs`` or ``wait_mult`` is negative.

    Example:
        ```pycon
        >>> from auntil.validation import validate_wait_params
        >>> validate_wait_params(wait_secs=1, wait_mult=2)
        >>> validate_wait_params(wait_secs=-1, wait_mult=2)  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        ValueError: wait_secs must be >= 0, got -1

        ```
    """
    if wait_secs < 0:
        msg = f"wait_secs must be >= 0, got {wait_secs}"
        raise ValueError(msg)
    if wait_mult < 0:
        msg = f"wait_mult must be >= 0, got {wait_mult}"
        raise ValueError(msg)
