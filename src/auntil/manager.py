r"""Callback manager for retry sequence lifecycle events.

This module provides the CallbackManager class that writes the handler
log lines and invokes the user-defined success and failure callbacks.
"""

from __future__ import annotations

__all__ = ["CallbackManager", "format_seconds"]

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

    from auntil.options import LoggerLike


def format_seconds(seconds: float) -> str:
    """Format a delay the way it appears in log lines.

    Integral values are rendered without a fractional part.

    Args:
        seconds: The delay in seconds.

    Returns:
        The formatted delay.

    Example:
        ```pycon
        >>> from auntil.manager import format_seconds
        >>> format_seconds(4.0)
        '4'
        >>> format_seconds(0.5)
        '0.5'

        ```
    """
    if isinstance(seconds, float) and seconds.is_integer():
        return str(int(seconds))
    return str(seconds)


class CallbackManager:
    """Manages log lines and callbacks during a retry sequence.

    Args:
        name: Label of the performer used in log lines.
        logger: Optional sink exposing ``info`` and ``warning``. A sink
            exposing ``warn`` instead of ``warning`` is accepted.
        success: Optional callback invoked with the accepted result values.
        failure: Optional callback invoked with the last rejected result
            values once the sequence is exhausted.
    """

    def __init__(
        self,
        name: str,
        logger: LoggerLike | None = None,
        success: Callable[..., Any] | None = None,
        failure: Callable[..., Any] | None = None,
    ) -> None:
        self.name = name
        self.logger = logger
        self.success = success
        self.failure = failure

    def on_success(self, results: tuple[Any, ...]) -> None:
        """Log the success line and invoke the success callback.

        Args:
            results: The accepted result values.
        """
        if self.logger is not None:
            self.logger.info(f"{self.name}: success")
        if self.success is not None:
            self.success(*results)

    def on_retry(self, calls: int, wait: float) -> None:
        """Log the retry line.

        Args:
            calls: Number of rejected results so far.
            wait: Delay in seconds before the next attempt.
        """
        if self.logger is not None:
            plural = "" if calls == 1 else "s"
            self._warn(
                f"{self.name}: {calls} failure{plural} - trying again in {format_seconds(wait)} seconds"
            )

    def on_failure(self, calls: int, results: tuple[Any, ...]) -> None:
        """Log the exhaustion line and invoke the failure callback.

        Args:
            calls: Number of rejected results.
            results: The last rejected result values.
        """
        if self.logger is not None:
            self._warn(f"{self.name}: too many failures ({calls})")
        if self.failure is not None:
            self.failure(*results)

    def on_exception(self, exc: BaseException) -> None:
        """Log a synchronous performer exception.

        Args:
            exc: The exception raised by the performer.
        """
        if self.logger is not None:
            self._warn(f'{self.name}: exception "{exc}"')

    def _warn(self, msg: str) -> None:
        warning = getattr(self.logger, "warning", None)
        if warning is None:
            warning = self.logger.warn
        warning(msg)
