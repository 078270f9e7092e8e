"""Unit tests for read operation polling."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from pydantic import ValidationError
from tenacity import stop_never

from blob_text_extractor.adapters.base import OCRError, ReadTimeoutError
from blob_text_extractor.config import Settings
from blob_text_extractor.models.read import ReadOperationResult, ReadOperationStatus
from blob_text_extractor.services.poller import RetryPolicy, poll_until_terminal


def _results(*statuses: ReadOperationStatus) -> AsyncMock:
    return AsyncMock(side_effect=[ReadOperationResult(status=status) for status in statuses])


class TestRetryPolicy:
    """Tests for RetryPolicy."""

    def test_waits_back_off_and_cap(self) -> None:
        """Test that waits continue the sequence started by initial_delay."""
        policy = RetryPolicy(initial_delay=1, max_delay=5, backoff_factor=2)
        wait = policy.wait_strategy()

        waits = [wait(MagicMock(attempt_number=number)) for number in range(1, 5)]

        assert waits == [2, 4, 5, 5]

    def test_zero_initial_delay_never_waits(self, fast_policy: RetryPolicy) -> None:
        wait = fast_policy.wait_strategy()

        assert wait(MagicMock(attempt_number=3)) == 0

    def test_timeout_shorter_than_initial_delay_rejected(self) -> None:
        with pytest.raises(ValidationError):
            RetryPolicy(initial_delay=10, timeout=5)

    def test_unbounded_policy(self) -> None:
        policy = RetryPolicy(max_attempts=None, timeout=None)

        assert policy.stop_strategy() is stop_never

    def test_from_settings(self) -> None:
        settings = Settings(
            poll_initial_delay=0.5,
            poll_max_delay=4,
            poll_backoff_factor=1.5,
            poll_max_attempts=7,
            poll_timeout=30,
        )

        policy = RetryPolicy.from_settings(settings)

        assert policy.initial_delay == 0.5
        assert policy.max_delay == 4
        assert policy.backoff_factor == 1.5
        assert policy.max_attempts == 7
        assert policy.timeout == 30


class TestPollUntilTerminal:
    """Tests for poll_until_terminal."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "final_status", [ReadOperationStatus.SUCCEEDED, ReadOperationStatus.FAILED]
    )
    async def test_stops_on_first_terminal_status(
        self, fast_policy: RetryPolicy, final_status: ReadOperationStatus
    ) -> None:
        """Test that both succeeded and failed end the loop."""
        fetch = _results(
            ReadOperationStatus.NOT_STARTED,
            ReadOperationStatus.RUNNING,
            ReadOperationStatus.RUNNING,
            final_status,
            ReadOperationStatus.RUNNING,
        )

        result = await poll_until_terminal(fetch, fast_policy)

        assert result.status == final_status
        assert fetch.await_count == 4

    @pytest.mark.asyncio
    async def test_immediate_terminal_status(self, fast_policy: RetryPolicy) -> None:
        fetch = _results(ReadOperationStatus.SUCCEEDED)

        result = await poll_until_terminal(fetch, fast_policy)

        assert result.status == ReadOperationStatus.SUCCEEDED
        assert fetch.await_count == 1

    @pytest.mark.asyncio
    async def test_sleeps_with_backoff_before_each_check(self) -> None:
        policy = RetryPolicy(initial_delay=2, max_delay=5, backoff_factor=2, timeout=None)
        sleep = AsyncMock()
        fetch = _results(
            ReadOperationStatus.RUNNING,
            ReadOperationStatus.RUNNING,
            ReadOperationStatus.RUNNING,
            ReadOperationStatus.SUCCEEDED,
        )

        await poll_until_terminal(fetch, policy, sleep=sleep)

        assert [call.args[0] for call in sleep.await_args_list] == [2, 4, 5, 5]

    @pytest.mark.asyncio
    async def test_max_attempts_exhausted(self) -> None:
        """Test that a job that never finishes stops after max_attempts."""
        policy = RetryPolicy(initial_delay=0, max_delay=0, max_attempts=3, timeout=None)
        fetch = AsyncMock(return_value=ReadOperationResult(status=ReadOperationStatus.RUNNING))

        with pytest.raises(ReadTimeoutError) as exc_info:
            await poll_until_terminal(fetch, policy)

        assert exc_info.value.attempts == 3
        assert fetch.await_count == 3

    @pytest.mark.asyncio
    async def test_stops_before_a_wait_that_crosses_the_deadline(self) -> None:
        """Test that polling gives up instead of sleeping past the timeout."""
        policy = RetryPolicy(
            initial_delay=1, max_delay=8, backoff_factor=2, max_attempts=None, timeout=5
        )
        sleep = AsyncMock()
        fetch = AsyncMock(return_value=ReadOperationResult(status=ReadOperationStatus.RUNNING))

        with pytest.raises(ReadTimeoutError) as exc_info:
            await poll_until_terminal(fetch, policy, sleep=sleep)

        # 1 + 2 seconds fit in the deadline, the next 4 second wait does not
        assert [call.args[0] for call in sleep.await_args_list] == [1, 2]
        assert fetch.await_count == 2
        assert exc_info.value.attempts == 2

    @pytest.mark.asyncio
    async def test_timeout_equal_to_initial_delay_checks_once(self) -> None:
        policy = RetryPolicy(initial_delay=3, max_delay=3, max_attempts=None, timeout=3)
        sleep = AsyncMock()
        fetch = AsyncMock(return_value=ReadOperationResult(status=ReadOperationStatus.RUNNING))

        with pytest.raises(ReadTimeoutError):
            await poll_until_terminal(fetch, policy, sleep=sleep)

        assert [call.args[0] for call in sleep.await_args_list] == [3]
        assert fetch.await_count == 1

    @pytest.mark.asyncio
    async def test_fetch_errors_are_not_retried(self, fast_policy: RetryPolicy) -> None:
        fetch = AsyncMock(side_effect=OCRError("service unavailable"))

        with pytest.raises(OCRError, match="service unavailable"):
            await poll_until_terminal(fetch, fast_policy)

        assert fetch.await_count == 1
