r"""Result acceptance logic for retry handlers.

This module provides the ResultDecider class that decides whether a
performer result is accepted and whether a rejected sequence should be
retried or given up.
"""

from __future__ import annotations

__all__ = ["ResultDecider"]

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

logger: logging.Logger = logging.getLogger(__name__)


class ResultDecider:
    """Decides whether a result is accepted and whether to retry.

    Args:
        checker: Predicate called with the result values.
        max_calls: Number of rejected results after which the sequence
            gives up.

    Example:
        ```pycon
        >>> from auntil.decider import ResultDecider
        >>> decider = ResultDecider(lambda result: result == 3, max_calls=7)
        >>> decider.accepts((3,))
        True
        >>> decider.accepts((2,))
        False
        >>> decider.should_retry(6), decider.should_retry(7)
        (True, False)

        ```
    """

    def __init__(self, checker: Callable[..., Any], max_calls: int) -> None:
        self.checker = checker
        self.max_calls = max_calls

    def accepts(self, results: tuple[Any, ...]) -> bool:
        """Evaluate the checker on the result values.

        Only a return value that is the ``True`` singleton accepts the
        result. Truthy values such as ``1`` or ``"yes"`` reject it.

        Args:
            results: The positional values passed to the completion callback.

        Returns:
            ``True`` if the result is accepted, otherwise ``False``.
        """
        verdict = self.checker(*results)
        if verdict is not True and verdict:
            logger.debug(f"Checker returned truthy non-True value {verdict!r}: rejecting")
        return verdict is True

    def should_retry(self, calls: int) -> bool:
        """Determine whether another attempt is allowed.

        Args:
            calls: Number of rejected results so far, including the
                latest one.

        Returns:
            ``True`` if the sequence should retry, ``False`` if it is
            exhausted.
        """
        return calls < self.max_calls
