"""Polling of asynchronous read operations."""

import asyncio
import time
from typing import Awaitable, Callable, Optional

import structlog
from pydantic import BaseModel, Field, model_validator
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    retry_if_result,
    stop_after_attempt,
    stop_any,
    stop_before_delay,
    stop_never,
    wait_exponential,
)
from tenacity.stop import stop_base
from tenacity.wait import wait_base

from blob_text_extractor.adapters.base import ReadTimeoutError
from blob_text_extractor.config import Settings
from blob_text_extractor.models.read import ReadOperationResult

logger = structlog.get_logger(__name__)


class RetryPolicy(BaseModel):
    """Bounded exponential backoff for status checks."""

    initial_delay: float = Field(default=2.0, ge=0, description="Delay before the first check")
    max_delay: float = Field(default=16.0, ge=0, description="Cap on a single delay")
    backoff_factor: float = Field(default=2.0, ge=1, description="Delay multiplier")
    max_attempts: Optional[int] = Field(default=60, ge=1, description="None means unbounded")
    timeout: Optional[float] = Field(default=300.0, gt=0, description="None means no deadline")

    @model_validator(mode="after")
    def check_timeout_covers_first_delay(self) -> "RetryPolicy":
        if self.timeout is not None and self.timeout < self.initial_delay:
            raise ValueError("timeout must not be shorter than initial_delay")
        return self

    @classmethod
    def from_settings(cls, settings: Settings) -> "RetryPolicy":
        return cls(
            initial_delay=settings.poll_initial_delay,
            max_delay=settings.poll_max_delay,
            backoff_factor=settings.poll_backoff_factor,
            max_attempts=settings.poll_max_attempts,
            timeout=settings.poll_timeout,
        )

    def wait_strategy(self) -> wait_base:
        """Waits between checks, continuing the sequence started by initial_delay."""
        return wait_exponential(
            multiplier=self.initial_delay * self.backoff_factor,
            exp_base=self.backoff_factor,
            max=self.max_delay,
        )

    def stop_strategy(self) -> stop_base:
        """
        Limits on the checks that follow the initial delay.

        The deadline stops polling before a wait that would cross it, so a
        poll never runs past ``timeout``.
        """
        stops: list[stop_base] = []
        if self.max_attempts is not None:
            stops.append(stop_after_attempt(self.max_attempts))
        if self.timeout is not None:
            stops.append(stop_before_delay(self.timeout - self.initial_delay))
        return stop_any(*stops) if stops else stop_never


def _is_pending(result: ReadOperationResult) -> bool:
    return not result.status.is_terminal


def _log_pending(retry_state: RetryCallState) -> None:
    result = retry_state.outcome.result()
    logger.info(
        "read_status_checked",
        attempt=retry_state.attempt_number,
        status=result.status.value,
    )


async def poll_until_terminal(
    fetch: Callable[[], Awaitable[ReadOperationResult]],
    policy: RetryPolicy,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> ReadOperationResult:
    """
    Check an operation until it leaves the not-started/running states.

    The first result with a terminal status is returned whether it succeeded
    or failed; the caller decides what a failure means. Errors raised by
    ``fetch`` are not retried.

    Args:
        fetch: Coroutine function returning the current operation state.
        policy: Delay and limit configuration.
        sleep: Awaitable sleep, replaceable in tests.

    Returns:
        The first terminal operation result.

    Raises:
        ReadTimeoutError: If max_attempts or timeout is reached first.
    """
    started = time.monotonic()

    if policy.initial_delay > 0:
        await sleep(policy.initial_delay)

    retrying = AsyncRetrying(
        sleep=sleep,
        retry=retry_if_result(_is_pending),
        wait=policy.wait_strategy(),
        stop=policy.stop_strategy(),
        after=_log_pending,
    )

    try:
        result = await retrying(fetch)
    except RetryError as e:
        attempts = e.last_attempt.attempt_number
        elapsed = time.monotonic() - started
        logger.error("read_polling_exhausted", attempts=attempts, elapsed_s=round(elapsed, 2))
        raise ReadTimeoutError(attempts=attempts, elapsed=elapsed) from e

    logger.info("read_operation_finished", status=result.status.value)
    return result
