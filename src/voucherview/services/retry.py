"""
Retry with exponential backoff for remote operations.

The cache store never retries on its own: a failed ``get_or_load`` surfaces
to the caller, which may wrap the call with ``retry_async``.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable
from typing import Callable, TypeVar

from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from voucherview.shared.errors import RemoteSourceError

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_RETRIES = 3
DEFAULT_DELAY = 1.0
DEFAULT_MAX_DELAY = 30.0


async def retry_async(
    operation: Callable[[], Awaitable[T]],
    max_retries: int = DEFAULT_MAX_RETRIES,
    delay: float = DEFAULT_DELAY,
    *,
    max_delay: float = DEFAULT_MAX_DELAY,
    retry_on: tuple[type[BaseException], ...] = (RemoteSourceError,),
) -> T:
    """
    Run ``operation`` until it succeeds or ``max_retries`` attempts failed.

    The wait doubles after every failure, starting at ``delay`` seconds.
    The last failure is re-raised unchanged.

    Args:
        operation: Zero-argument coroutine factory.
        max_retries: Total number of attempts.
        delay: First wait in seconds.
        max_delay: Upper bound of a single wait.
        retry_on: Exception types considered transient.
    """
    retrying = AsyncRetrying(
        stop=stop_after_attempt(max_retries),
        wait=wait_exponential(multiplier=delay, min=delay, max=max_delay),
        retry=retry_if_exception_type(retry_on),
        before_sleep=before_sleep_log(logger, logging.INFO),
        reraise=True,
    )
    return await retrying(operation)
