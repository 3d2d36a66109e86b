"""Tests for fixed-delay retry."""

from unittest.mock import AsyncMock, patch

import pytest

from devops_metrics.config import SyncConfig
from devops_metrics.github import GitHubRetryableError, RetryPolicy, execute_with_retry


class TestExecuteWithRetry:
    async def test_returns_first_success(self):
        operation = AsyncMock(return_value="ok")

        assert await execute_with_retry(operation, 3, 0) == "ok"
        assert operation.await_count == 1

    async def test_retries_until_success(self):
        operation = AsyncMock(side_effect=[GitHubRetryableError("502"), "ok"])

        assert await execute_with_retry(operation, 3, 0) == "ok"
        assert operation.await_count == 2

    async def test_exhausted_attempts_reraise_last_error(self):
        errors = [ValueError("first"), ValueError("second"), ValueError("third")]
        operation = AsyncMock(side_effect=errors)

        with pytest.raises(ValueError, match="third"):
            await execute_with_retry(operation, 3, 0)

        assert operation.await_count == 3

    async def test_fixed_delay_between_attempts(self):
        operation = AsyncMock(side_effect=[RuntimeError("a"), RuntimeError("b"), "ok"])

        with patch("devops_metrics.github.retry.asyncio.sleep", new=AsyncMock()) as sleep:
            await execute_with_retry(operation, 3, 250)

        assert [call.args[0] for call in sleep.await_args_list] == [0.25, 0.25]

    async def test_no_sleep_after_final_attempt(self):
        operation = AsyncMock(side_effect=RuntimeError("down"))

        with (
            patch("devops_metrics.github.retry.asyncio.sleep", new=AsyncMock()) as sleep,
            pytest.raises(RuntimeError),
        ):
            await execute_with_retry(operation, 2, 100)

        assert sleep.await_count == 1

    async def test_at_least_one_attempt(self):
        operation = AsyncMock(return_value=1)

        assert await execute_with_retry(operation, 0, 0) == 1


class TestRetryPolicy:
    def test_from_config(self):
        policy = RetryPolicy.from_config(SyncConfig(retry_attempts=5, retry_delay_ms=20))

        assert policy == RetryPolicy(max_attempts=5, delay_ms=20)

    async def test_execute(self, sync_config):
        operation = AsyncMock(side_effect=[RuntimeError("blip"), "done"])

        result = await RetryPolicy.from_config(sync_config).execute(
            operation, description="Fetch page 1"
        )

        assert result == "done"
