"""Caller-side retry of conflicting transactions using tenacity."""

from dataclasses import dataclass

import structlog
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from supplyhub.config import settings
from supplyhub.services.exceptions import ConflictError

logger = structlog.get_logger(__name__)


@dataclass
class ConflictRetryConfig:
    """Configuration for conflict retries with exponential backoff."""

    max_attempts: int = settings.conflict_retry_attempts
    min_wait: float = settings.conflict_retry_min_wait
    max_wait: float = settings.conflict_retry_max_wait
    multiplier: float = 0.05


def _log_retry(retry_state: RetryCallState) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning("Conflict, retrying", attempt=retry_state.attempt_number, error=str(exc))


def get_conflict_retrying(config: ConflictRetryConfig | None = None) -> AsyncRetrying:
    """Get configured AsyncRetrying for ConflictError.

    Only conflicts are retried; storage failures and validation errors
    propagate on the first attempt.

    Usage:
        async for attempt in get_conflict_retrying():
            with attempt:
                result = await ledger.submit(...)

    Args:
        config: Optional retry configuration. Uses settings defaults if not provided.

    Returns:
        AsyncRetrying instance configured for ConflictError retries.
    """
    cfg = config or ConflictRetryConfig()
    return AsyncRetrying(
        retry=retry_if_exception_type(ConflictError),
        stop=stop_after_attempt(cfg.max_attempts),
        wait=wait_exponential(
            multiplier=cfg.multiplier,
            min=cfg.min_wait,
            max=cfg.max_wait,
        ),
        before_sleep=_log_retry,
        reraise=True,
    )
