"""Retry Primitives — verifies bounded retry and visibility polling with a fake sleep.

Tests:
    - Success after transient failures, with backoff delays recorded
    - Non-retryable errors propagate on the first attempt
    - Exhaustion re-raises the last error after exactly max_attempts calls
    - wait_until_visible accepts sync and async checks, returns False when never visible
"""

import pytest

from orderdocs.core.backoff import BackoffPolicy
from orderdocs.infrastructure.retry import retry_async, wait_until_visible
from tests.fakes import RecordingSleep


class Transient(Exception):
    pass


def _is_transient(e: BaseException) -> bool:
    return isinstance(e, Transient)


async def test_retry_returns_after_transient_failures():
    sleep = RecordingSleep()
    calls = []

    async def fn(attempt: int) -> str:
        calls.append(attempt)
        if attempt < 2:
            raise Transient()
        return "done"

    result = await retry_async(
        fn, policy=BackoffPolicy(5, 100), is_retryable=_is_transient, sleep=sleep,
    )
    assert result == "done"
    assert calls == [0, 1, 2]
    assert sleep.delays == [0.1, 0.2]


async def test_non_retryable_error_propagates_immediately():
    sleep = RecordingSleep()
    calls = []

    async def fn(attempt: int):
        calls.append(attempt)
        raise KeyError("boom")

    with pytest.raises(KeyError):
        await retry_async(
            fn, policy=BackoffPolicy(5, 100), is_retryable=_is_transient, sleep=sleep,
        )
    assert calls == [0]
    assert sleep.delays == []


async def test_exhaustion_reraises_last_error():
    sleep = RecordingSleep()
    calls = []

    async def fn(attempt: int):
        calls.append(attempt)
        raise Transient(attempt)

    with pytest.raises(Transient) as info:
        await retry_async(
            fn, policy=BackoffPolicy(3, 10), is_retryable=_is_transient, sleep=sleep,
        )
    assert info.value.args == (2,)
    assert len(calls) == 3
    assert len(sleep.delays) == 2


async def test_visible_on_first_check_does_not_sleep():
    sleep = RecordingSleep()
    assert await wait_until_visible(lambda: True, policy=BackoffPolicy(3, 100), sleep=sleep)
    assert sleep.delays == []


async def test_visible_after_delay_with_async_check():
    sleep = RecordingSleep()
    seen = iter([False, False, True])

    async def check() -> bool:
        return next(seen)

    assert await wait_until_visible(check, policy=BackoffPolicy(5, 100), sleep=sleep)
    assert sleep.delays == [0.1, 0.2]


async def test_never_visible_returns_false_without_raising():
    sleep = RecordingSleep()
    policy = BackoffPolicy(4, 500, max_delay_ms=5000, exponential=True)
    assert not await wait_until_visible(lambda: False, policy=policy, sleep=sleep)
    assert sleep.delays == [0.5, 1.0, 2.0]
