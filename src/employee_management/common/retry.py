from __future__ import annotations

import logging
from typing import Callable, Optional, Tuple, Type, TypeVar, Union

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryExhausted(Exception):
    """Every attempt failed with a retryable error."""

    def __init__(self, attempts: int, last_error: Optional[BaseException]):
        super().__init__(f"gave up after {attempts} attempts")
        self.attempts = attempts
        self.last_error = last_error


def retry_on(
    retryable: Union[Type[BaseException], Tuple[Type[BaseException], ...]],
    operation: Callable[[int], T],
    *,
    max_attempts: int,
    label: str = "operation",
) -> T:
    """Run ``operation(attempt)`` until it succeeds, at most ``max_attempts`` times.

    Only ``retryable`` errors trigger another attempt; anything else
    propagates immediately. When the attempts run out ``RetryExhausted`` is
    raised with the last retryable error attached.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be >= 1")

    last_error: Optional[BaseException] = None
    for attempt in range(1, max_attempts + 1):
        try:
            return operation(attempt)
        except retryable as e:
            last_error = e
            logger.warning("%s failed on attempt %d/%d: %s", label, attempt, max_attempts, e)

    raise RetryExhausted(max_attempts, last_error)
