r"""Unit tests for performer adapters."""

from __future__ import annotations

import asyncio
from unittest.mock import Mock, call

import pytest

from auntil import AsyncioScheduler, UntilOptions, blocking_performer, coroutine_performer, until
from tests.helpers import ManualScheduler


def divide(a: int, b: int) -> float:
    return a / b


def div_mod(a: int, b: int) -> tuple[int, int]:
    return divmod(a, b)


########################################
#     Tests for blocking_performer     #
########################################


def test_blocking_performer_reports_value() -> None:
    """Test the return value is reported as one result."""
    complete = Mock()
    blocking_performer(div_mod)(7, 2, complete)
    complete.assert_called_once_with((3, 1))


def test_blocking_performer_unpack() -> None:
    """Test a returned tuple is spread when unpack is set."""
    complete = Mock()
    blocking_performer(div_mod, unpack=True)(7, 2, complete)
    complete.assert_called_once_with(3, 1)


def test_blocking_performer_keeps_name() -> None:
    assert blocking_performer(divide).__name__ == "divide"


def test_blocking_performer_exception_is_retried(
    scheduler: ManualScheduler, mock_logger: Mock
) -> None:
    """Test exceptions raised by the function count as failed attempts."""
    failure = Mock()
    handler = until(
        lambda *results: len(results) == 1,
        blocking_performer(divide),
        failure=failure,
        options=UntilOptions(max_calls=2, logger=mock_logger, scheduler=scheduler),
    )
    handler(1, 0)
    scheduler.run_all()

    failure.assert_called_once_with()
    assert mock_logger.warning.call_args_list[0] == call('divide: exception "division by zero"')


#########################################
#     Tests for coroutine_performer     #
#########################################


@pytest.mark.asyncio
async def test_coroutine_performer_reports_value() -> None:
    """Test the coroutine result is reported once the task is done."""

    async def double(value: int) -> int:
        await asyncio.sleep(0)
        return value * 2

    loop = asyncio.get_running_loop()
    future: asyncio.Future[tuple] = loop.create_future()
    coroutine_performer(double)(21, lambda *results: future.set_result(results))
    assert await asyncio.wait_for(future, timeout=1.0) == (42,)


@pytest.mark.asyncio
async def test_coroutine_performer_unpack() -> None:
    async def pair() -> tuple[int, int]:
        return 1, 2

    loop = asyncio.get_running_loop()
    future: asyncio.Future[tuple] = loop.create_future()
    coroutine_performer(pair, unpack=True)(lambda *results: future.set_result(results))
    assert await asyncio.wait_for(future, timeout=1.0) == (1, 2)


@pytest.mark.asyncio
async def test_coroutine_performer_exception_reports_empty_result() -> None:
    """Test a raising coroutine reports no values."""

    async def broken() -> None:
        msg = "unreachable"
        raise ConnectionError(msg)

    loop = asyncio.get_running_loop()
    future: asyncio.Future[tuple] = loop.create_future()
    coroutine_performer(broken)(lambda *results: future.set_result(results))
    assert await asyncio.wait_for(future, timeout=1.0) == ()


@pytest.mark.asyncio
async def test_coroutine_performer_exception_reports_fault() -> None:
    """Test a raising coroutine reports its exception to a completion
    exposing ``fault``."""
    error = ConnectionError("unreachable")

    async def broken() -> None:
        raise error

    loop = asyncio.get_running_loop()
    future: asyncio.Future[BaseException] = loop.create_future()
    complete = Mock(spec=["__call__", "fault"], side_effect=AssertionError)
    complete.fault.side_effect = future.set_result
    coroutine_performer(broken)(complete)
    assert await asyncio.wait_for(future, timeout=1.0) is error
    complete.assert_not_called()


def test_coroutine_performer_keeps_name() -> None:
    async def fetch() -> None:
        return None

    assert coroutine_performer(fetch).__name__ == "fetch"


def test_coroutine_performer_without_loop() -> None:
    """Test calling the performer outside an event loop fails."""

    async def fetch() -> None:
        return None

    with pytest.raises(RuntimeError):
        coroutine_performer(fetch)(Mock())


@pytest.mark.asyncio
async def test_coroutine_performer_with_handler(mock_logger: Mock) -> None:
    """Test a flaky coroutine is retried on the event loop until accepted."""
    attempts = []

    async def flaky(value: str) -> str:
        attempts.append(value)
        await asyncio.sleep(0)
        if len(attempts) < 3:
            msg = "try later"
            raise TimeoutError(msg)
        return value.upper()

    loop = asyncio.get_running_loop()
    future: asyncio.Future[str] = loop.create_future()
    handler = until(
        lambda *results: results == ("OK",),
        coroutine_performer(flaky),
        success=future.set_result,
        options=UntilOptions(
            logger=mock_logger, wait_secs=0.01, wait_mult=1, scheduler=AsyncioScheduler()
        ),
    )
    handler("ok")

    assert await asyncio.wait_for(future, timeout=5.0) == "OK"
    assert attempts == ["ok", "ok", "ok"]
    assert mock_logger.mock_calls == [
        call.warning('flaky: exception "try later"'),
        call.warning("flaky: 1 failure - trying again in 0.01 seconds"),
        call.warning('flaky: exception "try later"'),
        call.warning("flaky: 2 failures - trying again in 0.01 seconds"),
        call.info("flaky: success"),
    ]
