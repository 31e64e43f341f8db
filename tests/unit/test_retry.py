"""Tests for the caller-side conflict retry."""

from unittest.mock import AsyncMock

import pytest

from stockledger.application.retry import run_with_conflict_retry
from stockledger.core.exceptions import ConcurrentModificationError, InsufficientStockError


def _wrapped(mock: AsyncMock):
    async def operation(*args, **kwargs):
        return await mock(*args, **kwargs)

    return operation


def _conflict() -> ConcurrentModificationError:
    return ConcurrentModificationError(1, 1, expected_version=2)


class TestRunWithConflictRetry:
    async def test_returns_first_success(self):
        operation = AsyncMock(return_value="done")
        assert await run_with_conflict_retry(_wrapped(operation), "req", actor=None) == "done"
        operation.assert_awaited_once_with("req", actor=None)

    async def test_retries_lost_race(self):
        operation = AsyncMock(side_effect=[_conflict(), _conflict(), "done"])
        assert await run_with_conflict_retry(_wrapped(operation)) == "done"
        assert operation.await_count == 3

    async def test_gives_up_with_the_conflict(self):
        operation = AsyncMock(side_effect=_conflict())
        with pytest.raises(ConcurrentModificationError):
            await run_with_conflict_retry(_wrapped(operation), attempts=2)
        assert operation.await_count == 2

    async def test_other_errors_are_not_retried(self):
        operation = AsyncMock(side_effect=InsufficientStockError(1, 1, 5, 2))
        with pytest.raises(InsufficientStockError):
            await run_with_conflict_retry(_wrapped(operation))
        assert operation.await_count == 1
