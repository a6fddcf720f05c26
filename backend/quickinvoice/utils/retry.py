"""Shared retry utilities using tenacity."""

from dataclasses import dataclass

from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_random,
)


@dataclass
class RetryConfig:
    """Configuration for optimistic-concurrency retries with random jitter."""

    max_attempts: int = 5
    min_wait: float = 0.0
    max_wait: float = 0.2


def get_conflict_retrying(
    exception_types: type[BaseException] | tuple[type[BaseException], ...],
    config: RetryConfig | None = None,
) -> AsyncRetrying:
    """Get configured AsyncRetrying that retries on write conflicts.

    Usage:
        async for attempt in get_conflict_retrying(WriteConflict):
            with attempt:
                await try_conditional_write()

    Jitter keeps competing writers from retrying in lock-step. The last
    conflict is re-raised once attempts are exhausted.

    Args:
        exception_types: Exception type(s) that signal a lost race.
        config: Optional retry configuration. Uses defaults if not provided.

    Returns:
        AsyncRetrying instance configured for conflict retries.
    """
    cfg = config or RetryConfig()
    return AsyncRetrying(
        retry=retry_if_exception_type(exception_types),
        stop=stop_after_attempt(cfg.max_attempts),
        wait=wait_random(min=cfg.min_wait, max=cfg.max_wait),
        reraise=True,
    )
