"""Shared retry utilities using tenacity."""

from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_random,
)


@dataclass
class ConflictRetryConfig:
    """Configuration for retrying a transaction that lost a uniqueness race."""

    max_attempts: int = 5
    max_jitter: float = 0.05


def get_conflict_retrying(config: ConflictRetryConfig | None = None) -> AsyncRetrying:
    """Get configured AsyncRetrying for IntegrityError (unique constraint conflicts).

    Usage:
        async for attempt in get_conflict_retrying():
            with attempt:
                await run_transaction()

    The caller must roll back the failed transaction before re-raising,
    so each attempt starts clean. When attempts run out tenacity raises
    RetryError wrapping the last IntegrityError.

    Args:
        config: Optional retry configuration. Uses defaults if not provided.

    Returns:
        AsyncRetrying instance configured for IntegrityError retries.
    """
    cfg = config or ConflictRetryConfig()
    return AsyncRetrying(
        retry=retry_if_exception_type(IntegrityError),
        stop=stop_after_attempt(cfg.max_attempts),
        wait=wait_random(0, cfg.max_jitter),
        reraise=False,
    )
