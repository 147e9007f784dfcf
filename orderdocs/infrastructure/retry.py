"""Retry Primitives — bounded retry and "eventually visible" polling for flaky stores and synced folders.

Invariants:
    - retry_async calls fn at most policy.max_attempts times
    - Only errors accepted by is_retryable are retried; anything else propagates at once
    - After the last attempt the last retryable error is re-raised unchanged
    - wait_until_visible never raises for a negative check; it returns False
    - sleep is injected: tests pass a recording fake instead of asyncio.sleep

Design Decisions:
    - One combinator shared by counter allocation and identifier verification
      instead of per-call-site loops
    - Checks are plain callables (sync or async) so filesystem probes run in a thread
      without the primitive knowing about threads
"""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from orderdocs.core.backoff import BackoffPolicy

logger = logging.getLogger(__name__)

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[None]]


async def retry_async(
    fn: Callable[[int], Awaitable[T]],
    *,
    policy: BackoffPolicy,
    is_retryable: Callable[[BaseException], bool],
    sleep: Sleep = asyncio.sleep,
    label: str = "operation",
) -> T:
    """Run fn(attempt) until it returns, backing off between retryable failures."""
    for attempt in range(policy.max_attempts):
        try:
            return await fn(attempt)
        except Exception as e:
            if not is_retryable(e):
                raise
            if attempt + 1 >= policy.max_attempts:
                logger.warning(
                    f"{label} exhausted {policy.max_attempts} attempts: {e}",
                    extra={"attempt": attempt + 1},
                )
                raise
            delay = policy.delay_ms(attempt)
            logger.debug(
                f"{label} retry after {delay}ms: {e}",
                extra={"attempt": attempt + 1},
            )
            await sleep(delay / 1000)
    raise RuntimeError("unreachable: policy.max_attempts >= 1")


async def wait_until_visible(
    check: Callable[[], bool | Awaitable[bool]],
    *,
    policy: BackoffPolicy,
    sleep: Sleep = asyncio.sleep,
) -> bool:
    """Poll check() with growing delays; True as soon as it passes."""
    for attempt in range(policy.max_attempts):
        result = check()
        if inspect.isawaitable(result):
            result = await result
        if result:
            return True
        if attempt + 1 < policy.max_attempts:
            await sleep(policy.delay_ms(attempt) / 1000)
    return False
