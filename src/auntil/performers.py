r"""Adapters turning ordinary functions into callback-style performers.

A performer receives the handler arguments followed by a completion
callback. These adapters let plain functions and coroutine functions be
used as performers without writing that callback plumbing by hand.

Example:
    ```pycon
    >>> from auntil import blocking_performer, until
    >>> def add(a, b):
    ...     return a + b
    ...
    >>> handler = until(
    ...     lambda result: result == 3,
    ...     blocking_performer(add),
    ...     success=print,
    ... )
    >>> handler(1, 2)
    3
    >>> handler.name
    'add'

    ```
"""

from __future__ import annotations

__all__ = ["blocking_performer", "coroutine_performer"]

import asyncio
import functools
import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

logger: logging.Logger = logging.getLogger(__name__)

# Strong references to running tasks, the event loop only keeps weak ones
_background_tasks: set[asyncio.Task[Any]] = set()


def _deliver(complete: Callable[..., None], value: Any, unpack: bool) -> None:
    if unpack and isinstance(value, tuple):
        complete(*value)
    else:
        complete(value)


def blocking_performer(func: Callable[..., Any], *, unpack: bool = False) -> Callable[..., None]:
    """Wrap a function returning its result into a performer.

    The wrapped function is called with the handler arguments and its
    return value is reported through the completion callback. Exceptions
    propagate, so the handler treats them as a failed attempt.

    Args:
        func: The function to wrap.
        unpack: If ``True``, a returned tuple is reported as several
            result values instead of one.

    Returns:
        The performer.
    """

    @functools.wraps(func)
    def performer(*args: Any) -> None:
        *call_args, complete = args
        _deliver(complete, func(*call_args), unpack)

    return performer


def coroutine_performer(
    func: Callable[..., Awaitable[Any]], *, unpack: bool = False
) -> Callable[..., None]:
    """Wrap a coroutine function into a performer.

    Each attempt runs the coroutine as a task on the running event loop
    and reports its return value through the completion callback once the
    task is done. A coroutine that raises, or a task that is cancelled,
    reports an empty result, which the handler treats as a rejection. When
    the completion callback comes from a handler, the exception is also
    written to the handler logger like a synchronous performer fault.

    Args:
        func: The coroutine function to wrap.
        unpack: If ``True``, a returned tuple is reported as several
            result values instead of one.

    Returns:
        The performer. Calling it outside a running event loop raises
        ``RuntimeError``.

    Example:
        ```pycon
        >>> import asyncio
        >>> from auntil import coroutine_performer, until
        >>> async def fetch(value):
        ...     await asyncio.sleep(0)
        ...     return value
        ...
        >>> async def main():
        ...     done = asyncio.Event()
        ...     handler = until(
        ...         lambda result: result == "ok",
        ...         coroutine_performer(fetch),
        ...         success=lambda result: done.set(),
        ...     )
        ...     handler("ok")
        ...     await done.wait()
        ...
        >>> asyncio.run(main())

        ```
    """
    label = getattr(func, "__name__", repr(func))

    @functools.wraps(func)
    def performer(*args: Any) -> None:
        *call_args, complete = args
        loop = asyncio.get_running_loop()
        task = loop.create_task(func(*call_args))
        _background_tasks.add(task)

        def on_done(task: asyncio.Task[Any]) -> None:
            _background_tasks.discard(task)
            if task.cancelled():
                logger.debug(f"{label}: task cancelled")
                complete()
                return
            exc = task.exception()
            if exc is not None:
                logger.debug(f"{label}: coroutine raised {exc!r}")
                fault = getattr(complete, "fault", None)
                if fault is not None and isinstance(exc, Exception):
                    fault(exc)
                else:
                    complete()
                return
            _deliver(complete, task.result(), unpack)

        task.add_done_callback(on_done)

    return performer
