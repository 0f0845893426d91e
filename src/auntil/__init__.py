r"""auntil - Call an asynchronous operation until its result is good.

This package turns a callback-style operation (the performer) and a
predicate (the checker) into a reusable handler. Each call to the handler
invokes the performer and, while the checker rejects the result, retries
it with geometric backoff until the result is accepted or too many
results were rejected.

Key Features:
    - Strict acceptance: only a checker returning ``True`` accepts a result
    - Geometric backoff configurable with ``wait_secs`` and ``wait_mult``
    - Optional success and failure callbacks receiving the result values
    - Optional logger receiving one line per success, retry or give-up
    - Direct construction with ``until()`` or fluent construction with ``chain()``
    - Event loop or timer thread scheduling, and adapters for coroutines

Example:
    ```pycon
    >>> from auntil import chain, until
    >>> def add(a, b, next_):
    ...     next_(a + b)
    ...
    >>> handler = until(lambda result: result == 3, add, success=print)
    >>> handler(1, 2)
    3
    >>> handler = chain(lambda result: result == 3).exec(add).done(print).func()
    >>> handler(2, 1)
    3

    ```
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_MAX_CALLS",
    "DEFAULT_NAME",
    "DEFAULT_WAIT_MULT",
    "DEFAULT_WAIT_SECS",
    "AsyncioScheduler",
    "BaseScheduler",
    "Chain",
    "DefaultScheduler",
    "Handler",
    "InvalidArgumentError",
    "ThreadingScheduler",
    "UntilOptions",
    "__version__",
    "blocking_performer",
    "chain",
    "coroutine_performer",
    "until",
]

from importlib.metadata import PackageNotFoundError, version

from auntil.chain import Chain, chain
from auntil.exceptions import InvalidArgumentError
from auntil.handler import Handler, until
from auntil.options import (
    DEFAULT_MAX_CALLS,
    DEFAULT_NAME,
    DEFAULT_WAIT_MULT,
    DEFAULT_WAIT_SECS,
    UntilOptions,
)
from auntil.performers import blocking_performer, coroutine_performer
from auntil.scheduler import (
    AsyncioScheduler,
    BaseScheduler,
    DefaultScheduler,
    ThreadingScheduler,
)

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
