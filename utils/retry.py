"""
Retry with exponential backoff for single fallible store calls.

Knows nothing about products: give it a zero-argument callable and it
either returns that callable's result or re-raises its last error.
"""

import random
import time
from typing import Any, Callable, Optional, TypeVar
import structlog

from exceptions import ErrorKind

logger = structlog.get_logger(__name__)

T = TypeVar("T")

DEFAULT_MAX_RETRIES = 3
DEFAULT_BASE_DELAY = 1.0
DEFAULT_MAX_JITTER = 1.0


def classify_error(error: BaseException) -> ErrorKind:
    """
    Decide whether an error is worth retrying.

    Errors that carry an explicit ``kind`` (PersistenceError) are trusted.
    Anything else is CLIENT only when it exposes a 4xx ``status_code`` or
    numeric ``code``; otherwise UNKNOWN, which is retried.
    """
    kind = getattr(error, "kind", None)
    if isinstance(kind, ErrorKind):
        return kind

    for attr in ("status_code", "code"):
        status = _as_int(getattr(error, attr, None))
        if status is not None and 400 <= status < 500:
            return ErrorKind.CLIENT

    return ErrorKind.UNKNOWN


def backoff_delay(
    attempt: int,
    base_delay: float = DEFAULT_BASE_DELAY,
    max_jitter: float = DEFAULT_MAX_JITTER
) -> float:
    """Seconds to wait after failed attempt number ``attempt`` (0-based)."""
    return base_delay * (2 ** attempt) + random.uniform(0, max_jitter)


def retry_operation(
    operation: Callable[[], T],
    max_retries: int = DEFAULT_MAX_RETRIES,
    base_delay: float = DEFAULT_BASE_DELAY,
    max_jitter: float = DEFAULT_MAX_JITTER,
    sleep: Callable[[float], Any] = time.sleep,
    operation_name: Optional[str] = None
) -> T:
    """
    Run ``operation`` with bounded retries.

    Args:
        operation: Zero-argument callable performing one attempt
        max_retries: Retries after the first attempt (3 → 4 attempts total)
        base_delay: Backoff base in seconds
        max_jitter: Upper bound of uniform jitter in seconds
        sleep: Wait function (injected by tests)
        operation_name: Label for log events

    Returns:
        Whatever ``operation`` returns on its first successful attempt

    Raises:
        The client error immediately, or the last error once retries run out
    """
    name = operation_name or getattr(operation, "__name__", "operation")
    last_error: Optional[BaseException] = None

    for attempt in range(max_retries + 1):
        try:
            return operation()
        except Exception as e:
            last_error = e
            kind = classify_error(e)

            if kind == ErrorKind.CLIENT:
                logger.warning(
                    "retry_aborted_client_error",
                    operation=name,
                    attempt=attempt + 1,
                    error=str(e)
                )
                raise

            if attempt == max_retries:
                break

            delay = backoff_delay(attempt, base_delay, max_jitter)
            logger.warning(
                "retry_scheduled",
                operation=name,
                attempt=attempt + 1,
                kind=kind.value,
                delay_seconds=round(delay, 3),
                error=str(e)
            )
            sleep(delay)

    logger.error(
        "retry_exhausted",
        operation=name,
        attempts=max_retries + 1,
        error=str(last_error)
    )
    raise last_error


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.isdigit():
        return int(value)
    return None
