"""
Retry Logic with Exponential Backoff

Provides a retry policy value object and a combinator that runs an
operation under that policy. Failures are returned as a RetryOutcome
instead of being raised, so callers decide what an exhausted retry means.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

from claims.identifiers.errors import NetworkError, RateLimitError, RequestTimeoutError


logger = logging.getLogger(__name__)


# Transient errors that should trigger retry
TRANSIENT_ERRORS = (
    RateLimitError,
    NetworkError,
    RequestTimeoutError,
)


def is_transient_error(error: Exception) -> bool:
    """Check if an error is transient and should be retried.

    Args:
        error: Exception to check

    Returns:
        True if error is transient, False otherwise
    """
    return isinstance(error, TRANSIENT_ERRORS)


def calculate_backoff_delay(attempt: int, base_delay: float = 1.0, multiplier: float = 2.0) -> float:
    """Calculate exponential backoff delay.

    Uses exponential backoff: delay = base_delay * (multiplier ** attempt)
    - Attempt 0: 1s
    - Attempt 1: 2s
    - Attempt 2: 4s

    Args:
        attempt: Number of the failed attempt (0-indexed)
        base_delay: Base delay in seconds
        multiplier: Growth factor between consecutive delays

    Returns:
        Delay in seconds
    """
    return base_delay * (multiplier ** attempt)


@dataclass(frozen=True)
class RetryPolicy:
    """How often and how patiently to retry an operation.

    Attributes:
        max_attempts: Total attempts including the first one
        base_delay: Delay before the first retry, in seconds
        multiplier: Growth factor between consecutive delays
        retry_on: Predicate selecting which failures are worth retrying
    """
    max_attempts: int = 3
    base_delay: float = 1.0
    multiplier: float = 2.0
    retry_on: Callable[[Exception], bool] = is_transient_error

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.base_delay < 0:
            raise ValueError("base_delay must be non-negative")
        if self.multiplier < 1:
            raise ValueError("multiplier must be at least 1")

    def delay_for(self, attempt: int) -> float:
        return calculate_backoff_delay(attempt, self.base_delay, self.multiplier)


@dataclass
class RetryOutcome:
    """Result of running an operation under a retry policy.

    Attributes:
        value: Return value of the successful attempt
        error: Last failure if no attempt succeeded
        attempts: Number of attempts made
    """
    value: Any = None
    error: Optional[Exception] = None
    attempts: int = 0

    @property
    def succeeded(self) -> bool:
        return self.error is None


def attempt_with_policy(
    operation: Callable[[], Any],
    policy: RetryPolicy,
    sleep: Callable[[float], None] = time.sleep,
    description: str = "operation",
) -> RetryOutcome:
    """Run an operation, retrying failures the policy considers transient.

    Args:
        operation: Zero-argument callable to run
        policy: Retry policy to apply
        sleep: Function used to wait between attempts
        description: Label used in log messages

    Returns:
        RetryOutcome with either the value or the last error

    Example:
        >>> outcome = attempt_with_policy(lambda: client.lookup(batch), RetryPolicy())
        >>> if not outcome.succeeded:
        ...     mark_unverified(batch)
    """
    last_error: Optional[Exception] = None

    for attempt in range(policy.max_attempts):
        try:
            return RetryOutcome(value=operation(), attempts=attempt + 1)
        except Exception as e:
            last_error = e

            if not policy.retry_on(e):
                logger.error(f"Permanent error in {description}: {type(e).__name__}: {e}")
                return RetryOutcome(error=e, attempts=attempt + 1)

            if attempt < policy.max_attempts - 1:
                delay = policy.delay_for(attempt)
                logger.warning(
                    f"Transient error in {description} "
                    f"(attempt {attempt + 1}/{policy.max_attempts}): "
                    f"{type(e).__name__}: {e}. "
                    f"Retrying in {delay}s..."
                )
                sleep(delay)

    logger.error(
        f"All {policy.max_attempts} attempts failed for {description}: "
        f"{type(last_error).__name__}: {last_error}"
    )
    return RetryOutcome(error=last_error, attempts=policy.max_attempts)
