"""
Caller-side retry for lost ledger races.

Processors never retry on their own. A caller that wants to absorb a
ConcurrentModificationError wraps the whole unit of work here; every other
error propagates on the first attempt.
"""

from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from stockledger.config import get_logger, get_settings
from stockledger.core.exceptions import ConcurrentModificationError

logger = get_logger(__name__)

T = TypeVar("T")


def _log_retry(retry_state: RetryCallState) -> None:
    """Log retry attempts."""
    logger.warning(
        "ledger_conflict_retry",
        attempt=retry_state.attempt_number,
        error=str(retry_state.outcome.exception()) if retry_state.outcome else None,
    )


def conflict_retry(attempts: int | None = None, wait: float | None = None) -> Any:
    """Tenacity decorator retrying only ConcurrentModificationError."""
    settings = get_settings()
    attempts = attempts or settings.ledger.conflict_retries
    wait = settings.ledger.conflict_retry_wait if wait is None else wait
    return retry(
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=wait, min=wait, max=wait * 8),
        retry=retry_if_exception_type(ConcurrentModificationError),
        before_sleep=_log_retry,
        reraise=True,
    )


async def run_with_conflict_retry(
    operation: Callable[..., Awaitable[T]],
    *args: Any,
    attempts: int | None = None,
    **kwargs: Any,
) -> T:
    """
    Run ``operation(*args, **kwargs)``, retrying lost version races.

    After the last attempt the ConcurrentModificationError itself is raised.
    """
    return await conflict_retry(attempts)(operation)(*args, **kwargs)
