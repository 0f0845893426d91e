r"""Exceptions raised by the auntil package."""

from __future__ import annotations

__all__ = ["InvalidArgumentError"]


class InvalidArgumentError(TypeError):
    """Exception raised when a handler is built from invalid arguments.

    This exception is raised at construction time, for example when the
    checker or the performer is not callable, or when the options contain
    an unknown key. It is never raised by a running handler.

    Args:
        message: A descriptive error message.

    Example:
        ```pycon
        >>> from auntil.exceptions import InvalidArgumentError
        >>> raise InvalidArgumentError("checker must be callable")
        Traceback (most recent call last):
            ...
        auntil.exceptions.InvalidArgumentError: checker must be callable

        ```
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
