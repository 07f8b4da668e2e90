"""Tests for the retry policy."""

import random
from unittest.mock import AsyncMock

import pytest

from teko.core.retry import RetryContext, RetryPolicy
from teko.errors import NetworkMismatchError, RetryExhaustedError, TransportError, ValidationError


@pytest.fixture
def sleep():
    """Sleep double that records requested pauses."""
    return AsyncMock()


@pytest.fixture
def policy(mock_logger, sleep):
    """RetryPolicy with a seeded RNG and no real sleeping."""
    return RetryPolicy(logger=mock_logger, sleep=sleep, rng=random.Random(1234))


class TestRetryContext:
    """Tests for RetryContext."""

    def test_last_attempt(self):
        """is_last_attempt is reached at max_attempts."""
        context = RetryContext(label="1", max_attempts=2, backoff_range=(5, 10))

        context.attempt = 1
        assert context.is_last_attempt is False
        context.attempt = 2
        assert context.is_last_attempt is True


class TestRetryPolicySuccess:
    """Tests for operations that eventually succeed."""

    @pytest.mark.asyncio
    async def test_first_attempt_success(self, policy, sleep):
        """A successful first attempt returns without sleeping."""
        operation = AsyncMock(return_value="ok")

        result = await policy.execute(operation, max_attempts=3, label="1")

        assert result == "ok"
        operation.assert_awaited_once()
        sleep.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("max_attempts,failures", [(2, 1), (3, 2), (5, 3)])
    async def test_k_failures_then_success(self, policy, sleep, max_attempts, failures):
        """k failures before success sleep exactly k times within range."""
        side_effect = [TransportError(f"boom {i}") for i in range(failures)] + ["minted"]
        operation = AsyncMock(side_effect=side_effect)

        result = await policy.execute(
            operation, max_attempts=max_attempts, backoff_range=(5, 10), label="1"
        )

        assert result == "minted"
        assert operation.await_count == failures + 1
        assert sleep.await_count == failures
        for call in sleep.await_args_list:
            assert 5 <= call.args[0] <= 10
            assert isinstance(call.args[0], int)

    @pytest.mark.asyncio
    async def test_success_short_circuits(self, policy):
        """No further attempts after a success."""
        operation = AsyncMock(side_effect=[ValueError("first"), 42, 43])

        result = await policy.execute(operation, max_attempts=3, label="1")

        assert result == 42
        assert operation.await_count == 2

    @pytest.mark.asyncio
    async def test_fixed_backoff(self, policy, sleep):
        """A degenerate range always pauses for that value."""
        operation = AsyncMock(side_effect=[ValueError("x"), ValueError("y"), "ok"])

        await policy.execute(operation, max_attempts=3, backoff_range=(7, 7), label="1")

        assert [c.args[0] for c in sleep.await_args_list] == [7, 7]

    @pytest.mark.asyncio
    async def test_warning_logged_per_failure(self, policy, mock_logger):
        """Each failed non-final attempt logs a warning with label and message."""
        operation = AsyncMock(side_effect=[TransportError("rpc down"), "ok"])

        await policy.execute(operation, max_attempts=3, label="acct-7")

        mock_logger.warning.assert_called_once()
        message = mock_logger.warning.call_args.args[0]
        assert "acct-7" in message
        assert "rpc down" in message
        assert mock_logger.warning.call_args.kwargs["label"] == "acct-7"
        mock_logger.error.assert_not_called()


class TestRetryPolicyExhaustion:
    """Tests for operations that never succeed."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("max_attempts", [1, 2, 3, 4])
    async def test_always_failing(self, policy, sleep, max_attempts):
        """Always-failing operation is attempted exactly n times."""
        operation = AsyncMock(
            side_effect=[TransportError(f"attempt {i}") for i in range(1, max_attempts + 1)]
        )

        with pytest.raises(RetryExhaustedError) as exc_info:
            await policy.execute(operation, max_attempts=max_attempts, label="1")

        assert operation.await_count == max_attempts
        assert sleep.await_count == max_attempts - 1
        assert f"attempt {max_attempts}" in str(exc_info.value)
        assert exc_info.value.attempts == max_attempts

    @pytest.mark.asyncio
    async def test_exhausted_error_chains_last_failure(self, policy):
        """The propagated error is chained from the last attempt's error."""
        last = TransportError("final failure")
        operation = AsyncMock(side_effect=[TransportError("first"), last])

        with pytest.raises(RetryExhaustedError) as exc_info:
            await policy.execute(operation, max_attempts=2, label="wallet-1")

        assert exc_info.value.__cause__ is last
        assert exc_info.value.last_error is last
        assert exc_info.value.label == "wallet-1"
        assert str(exc_info.value) == "wallet-1 | Max attempts reached: final failure"

    @pytest.mark.asyncio
    async def test_error_logged_on_exhaustion(self, policy, mock_logger):
        """Exhaustion logs at error level with the label and message."""
        operation = AsyncMock(side_effect=TransportError("still down"))

        with pytest.raises(RetryExhaustedError):
            await policy.execute(operation, max_attempts=3, label="1")

        assert mock_logger.warning.call_count == 2
        mock_logger.error.assert_called_once()
        assert "still down" in mock_logger.error.call_args.args[0]
        assert mock_logger.error.call_args.kwargs["label"] == "1"


class TestRetryPolicyFatal:
    """Tests for errors that must not be retried."""

    @pytest.mark.asyncio
    async def test_network_mismatch_not_retried(self, policy, sleep):
        """NetworkMismatchError propagates on the first attempt."""
        operation = AsyncMock(side_effect=NetworkMismatchError(6342, 1))

        with pytest.raises(NetworkMismatchError):
            await policy.execute(operation, max_attempts=3, label="1")

        operation.assert_awaited_once()
        sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_validation_error_not_retried(self, policy):
        """ValidationError propagates on the first attempt."""
        operation = AsyncMock(side_effect=ValidationError("bad key"))

        with pytest.raises(ValidationError):
            await policy.execute(operation, max_attempts=3, label="1")

        operation.assert_awaited_once()


class TestRetryPolicyArguments:
    """Tests for argument validation."""

    @pytest.mark.asyncio
    async def test_zero_attempts_rejected(self, policy):
        """max_attempts below 1 raises ValueError."""
        with pytest.raises(ValueError, match="max_attempts"):
            await policy.execute(AsyncMock(), max_attempts=0)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("backoff_range", [(10, 5), (-1, 5)])
    async def test_invalid_range_rejected(self, policy, backoff_range):
        """Inverted or negative ranges raise ValueError."""
        with pytest.raises(ValueError, match="backoff range"):
            await policy.execute(AsyncMock(), backoff_range=backoff_range)

    @pytest.mark.asyncio
    async def test_no_state_between_calls(self, policy):
        """Each execute call starts with a fresh attempt budget."""
        failing = AsyncMock(side_effect=TransportError("x"))
        with pytest.raises(RetryExhaustedError):
            await policy.execute(failing, max_attempts=2, label="1")

        operation = AsyncMock(side_effect=[TransportError("y"), "ok"])
        assert await policy.execute(operation, max_attempts=2, label="1") == "ok"
