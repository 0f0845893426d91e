r"""Configuration dataclass and defaults for retry handlers.

This module provides the default option values, the immutable
``UntilOptions`` configuration object and the helpers that turn the
user-supplied options (an ``UntilOptions``, a mapping or nothing) into a
resolved configuration.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_MAX_CALLS",
    "DEFAULT_NAME",
    "DEFAULT_WAIT_MULT",
    "DEFAULT_WAIT_SECS",
    "LoggerLike",
    "UntilOptions",
    "coerce_options",
    "resolve_name",
]

from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from typing import TYPE_CHECKING, Any, Protocol

from auntil.exceptions import InvalidArgumentError
from auntil.validation import validate_wait_params

if TYPE_CHECKING:
    from collections.abc import Callable

    from auntil.scheduler import BaseScheduler


# Default delay in seconds before the first retry
DEFAULT_WAIT_SECS = 1.0

# Default factor applied to the delay after each retry
# With 1.0 and 2.0: retries wait 1s, 2s, 4s, 8s, ...
DEFAULT_WAIT_MULT = 2.0

# Default number of rejected results before giving up
# 7 calls with the defaults above take about a minute
DEFAULT_MAX_CALLS = 7

# Label used in log lines when the performer has no usable name
DEFAULT_NAME = "anonymous function"

# camelCase option names accepted in mappings for compatibility
_ALIASES = {
    "waitSecs": "wait_secs",
    "waitMult": "wait_mult",
    "maxCalls": "max_calls",
}


class LoggerLike(Protocol):
    """Sink receiving the handler log lines.

    ``logging.Logger`` satisfies this protocol. Sinks exposing ``warn``
    instead of ``warning`` are accepted too.
    """

    def info(self, msg: str) -> Any: ...

    def warning(self, msg: str) -> Any: ...


@dataclass(frozen=True)
class UntilOptions:
    """Resolved configuration of a retry handler.

    Instances are immutable: a handler keeps the options it was created
    with for its whole lifetime, and ``merge`` returns a new instance.

    Args:
        name: Optional label used in log lines. When ``None``, the label
            is derived from the performer name.
        logger: Optional sink exposing ``info`` and ``warning`` (or
            ``warn`` when it has no ``warning``). When
            ``None``, no log line is emitted.
        wait_secs: Delay in seconds before the first retry. Must be >= 0.
        wait_mult: Factor applied to the delay after each retry. Must be >= 0.
        max_calls: Number of rejected results after which the handler
            gives up. Values <= 0 give up after the first rejection.
        scheduler: Optional timer used to delay retries. When ``None``,
            a ``DefaultScheduler`` is used.

    Example:
        ```pycon
        >>> from auntil.options import UntilOptions
        >>> options = UntilOptions()
        >>> options.max_calls
        7
        >>> options = UntilOptions(max_calls=3, wait_secs=2.0)
        >>> merged = options.merge(wait_mult=1.0)
        >>> merged.wait_mult, merged.max_calls
        (1.0, 3)
        >>> options.wait_mult  # Original unchanged
        2.0

        ```
    """

    name: str | None = None
    logger: LoggerLike | None = None
    wait_secs: float = DEFAULT_WAIT_SECS
    wait_mult: float = DEFAULT_WAIT_MULT
    max_calls: int = DEFAULT_MAX_CALLS
    scheduler: BaseScheduler | None = None

    def __post_init__(self) -> None:
        """Validate configuration parameters after initialization.

        Raises:
            ValueError: If ``wait_secs`` or ``wait_mult`` is negative.
        """
        validate_wait_params(wait_secs=self.wait_secs, wait_mult=self.wait_mult)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> UntilOptions:
        """Create options from a mapping.

        Keys are the field names of ``UntilOptions``. The camelCase names
        ``waitSecs``, ``waitMult`` and ``maxCalls`` are accepted as
        aliases. Missing keys take their default values.

        Args:
            mapping: The option values.

        Returns:
            The resolved options.

        Raises:
            InvalidArgumentError: If the mapping contains an unknown key.

        Example:
            ```pycon
            >>> from auntil.options import UntilOptions
            >>> options = UntilOptions.from_mapping({"waitSecs": 2, "maxCalls": 3})
            >>> options.wait_secs, options.max_calls
            (2, 3)

            ```
        """
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in mapping.items():
            field_name = _ALIASES.get(key, key)
            if field_name not in known:
                msg = f"Unknown option {key!r}, expected one of {sorted(known | set(_ALIASES))}"
                raise InvalidArgumentError(msg)
            kwargs[field_name] = value
        return cls(**kwargs)

    def merge(self, **overrides: Any) -> UntilOptions:
        """Create new options with the specified values overridden.

        Only non-None override values are applied.

        Args:
            **overrides: Keyword arguments for the fields to override.

        Returns:
            A new ``UntilOptions`` instance with overrides applied.
        """
        filtered_overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **filtered_overrides)


def coerce_options(options: UntilOptions | Mapping[str, Any] | None) -> UntilOptions:
    """Turn user-supplied options into an ``UntilOptions`` instance.

    Args:
        options: An ``UntilOptions`` instance, a mapping of option values,
            or ``None`` for the defaults.

    Returns:
        The resolved options.

    Raises:
        InvalidArgumentError: If ``options`` has an unsupported type or
            the mapping contains an unknown key.
    """
    if options is None:
        return UntilOptions()
    if isinstance(options, UntilOptions):
        return options
    if isinstance(options, Mapping):
        return UntilOptions.from_mapping(options)
    msg = f"options must be an UntilOptions, a mapping or None, got {type(options).__name__}"
    raise InvalidArgumentError(msg)


def resolve_name(options: UntilOptions, performer: Callable[..., Any]) -> str:
    """Resolve the label used in log lines.

    The explicit ``name`` option wins, then the performer ``__name__``,
    then ``DEFAULT_NAME``. Lambdas and callables without a name count as
    anonymous.

    Args:
        options: The handler options.
        performer: The operation under retry.

    Returns:
        The label.

    Example:
        ```pycon
        >>> from auntil.options import UntilOptions, resolve_name
        >>> def fetch(next_): ...
        >>> resolve_name(UntilOptions(), fetch)
        'fetch'
        >>> resolve_name(UntilOptions(name="getData"), fetch)
        'getData'
        >>> resolve_name(UntilOptions(), lambda next_: None)
        'anonymous function'

        ```
    """
    if options.name:
        return options.name
    name = getattr(performer, "__name__", None)
    if isinstance(name, str) and name and name != "<lambda>":
        return name
    return DEFAULT_NAME
