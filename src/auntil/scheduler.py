r"""Timer capabilities used to delay retries.

A scheduler runs a callback once after a delay. The retry engine never
blocks while waiting: it asks the scheduler to start the next attempt
later and returns immediately.

Example:
    ```pycon
    >>> import asyncio
    >>> from auntil.scheduler import AsyncioScheduler
    >>> async def main():
    ...     done = asyncio.Event()
    ...     AsyncioScheduler().call_later(0.01, done.set)
    ...     await done.wait()
    ...
    >>> asyncio.run(main())

    ```
"""

from __future__ import annotations

__all__ = ["AsyncioScheduler", "BaseScheduler", "DefaultScheduler", "ThreadingScheduler"]

import asyncio
import logging
import threading
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

logger: logging.Logger = logging.getLogger(__name__)


class BaseScheduler(ABC):
    """Abstract base class for schedulers."""

    @abstractmethod
    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> None:
        """Run ``callback(*args)`` once after ``delay`` seconds.

        Args:
            delay: The delay in seconds. Must be >= 0.
            callback: The function to call.
            *args: Positional arguments passed to ``callback``.
        """


class AsyncioScheduler(BaseScheduler):
    """Scheduler backed by an asyncio event loop.

    Args:
        loop: Optional event loop. When ``None``, the loop running in the
            calling thread is used at scheduling time.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self.loop = loop

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> None:
        """Schedule ``callback(*args)`` on the event loop.

        Raises:
            RuntimeError: If no loop was given and none is running.
        """
        loop = self.loop if self.loop is not None else asyncio.get_running_loop()
        logger.debug(f"Scheduling {callback!r} in {delay}s on event loop")
        loop.call_later(delay, callback, *args)


class ThreadingScheduler(BaseScheduler):
    """Scheduler starting one ``threading.Timer`` per call.

    Args:
        daemon: Whether timer threads are daemonic. Non-daemonic timers
            keep the process alive until pending retries have run, so a
            script ending right after calling a handler still reaches
            success or failure. Daemonic timers are dropped at exit.
    """

    def __init__(self, daemon: bool = False) -> None:
        self.daemon = daemon

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> None:
        timer = threading.Timer(delay, callback, args=args)
        timer.daemon = self.daemon
        logger.debug(f"Scheduling {callback!r} in {delay}s on timer thread")
        timer.start()


class DefaultScheduler(BaseScheduler):
    """Scheduler picking the event loop when one is running.

    When an asyncio event loop is running in the calling thread the
    callback is scheduled on it, otherwise a non-daemonic timer thread
    is used.
    """

    def __init__(self) -> None:
        self._threading = ThreadingScheduler()

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._threading.call_later(delay, callback, *args)
            return
        AsyncioScheduler(loop).call_later(delay, callback, *args)
