"""
Webhook Retry Policy

Decides which delivery failures are worth another attempt and how long to
wait before it.
"""

import logging
import time
from typing import Callable, Optional, TypeVar

import requests

logger = logging.getLogger(__name__)

T = TypeVar('T')

# Rate limited or a server-side hiccup; anything else will fail the same way again
RETRYABLE_STATUS = frozenset({429, 500, 502, 503, 504})


def is_transient(error: Exception) -> bool:
    """True for failures a later attempt can succeed on."""
    if isinstance(error, requests.HTTPError):
        response = error.response
        return response is not None and response.status_code in RETRYABLE_STATUS
    return isinstance(error, (requests.ConnectionError, requests.Timeout))


def retry_after(error: Exception) -> Optional[float]:
    """Seconds the server asked us to wait (Retry-After header), if any."""
    response = getattr(error, "response", None)
    if response is None:
        return None
    try:
        return max(float(response.headers.get("Retry-After")), 0.0)
    except (TypeError, ValueError):
        return None


class RetryStrategy:
    """
    Retries webhook POSTs on transient failures with exponential backoff.

    A Retry-After header overrides the computed delay; every delay is capped
    at ``max_delay``. Non-transient errors, such as 404 for a revoked webhook,
    are raised on the first attempt.

    Usage:
        retry = RetryStrategy(max_retries=3)
        retry.execute(lambda: post(payload))
    """

    def __init__(
        self,
        max_retries: int = 3,
        base_delay: float = 1.0,
        max_delay: float = 30.0,
        exponential_backoff: bool = True,
    ):
        """
        Args:
            max_retries: Maximum number of attempts (at least one is made)
            base_delay: Delay before the second attempt, in seconds
            max_delay: Upper bound for any single delay, in seconds
            exponential_backoff: Double the delay after each failed attempt
        """
        self.max_retries = max(max_retries, 1)
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.exponential_backoff = exponential_backoff

    def execute(
        self,
        func: Callable[[], T],
        on_retry: Optional[Callable[[int, Exception], None]] = None,
    ) -> T:
        """
        Call ``func`` until it succeeds, a non-transient error occurs, or the
        attempts run out.

        Args:
            func: Delivery callable, raising requests exceptions on failure
            on_retry: Called with (attempt, exception) before each wait

        Raises:
            The last delivery error
        """
        attempt = 1
        while True:
            try:
                return func()
            except requests.RequestException as e:
                if attempt >= self.max_retries or not is_transient(e):
                    raise

                delay = self.delay_for(attempt, e)
                logger.warning(
                    "Webhook attempt %d/%d failed: %s. Retrying in %.1fs",
                    attempt,
                    self.max_retries,
                    e,
                    delay,
                )
                if on_retry:
                    on_retry(attempt, e)
                time.sleep(delay)
                attempt += 1

    def delay_for(self, attempt: int, error: Optional[Exception] = None) -> float:
        """Seconds to wait after failed attempt number ``attempt`` (1-based)."""
        hint = retry_after(error) if error is not None else None
        if hint is not None:
            return min(hint, self.max_delay)
        if self.exponential_backoff:
            return min(self.base_delay * (2 ** (attempt - 1)), self.max_delay)
        return min(self.base_delay, self.max_delay)
