"""Retry with exponential backoff for calls to external services."""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

TRANSIENT_PATTERNS = (
    "timeout",
    "timed out",
    "connection",
    "rate limit",
    "429",
    "500",
    "502",
    "503",
    "504",
    "temporarily",
    "unavailable",
    "overloaded",
)


@dataclass
class RetryConfig:
    """Configuration for retry behavior."""

    max_attempts: int = 3
    base_delay: float = 1.0
    max_delay: float = 30.0
    exponential_base: float = 2.0
    jitter_factor: float = 0.2  # +/-20% random variation


class TransientError(Exception):
    """An error worth retrying."""


class PermanentError(Exception):
    """An error that must not be retried."""


def is_transient_error(error: BaseException) -> bool:
    if isinstance(error, TransientError):
        return True
    if isinstance(error, PermanentError):
        return False
    if isinstance(error, (ConnectionError, TimeoutError)):
        return True
    message = str(error).lower()
    return any(pattern in message for pattern in TRANSIENT_PATTERNS)


def backoff_delay(config: RetryConfig, attempt: int, rng: Callable[[], float] = random.random) -> float:
    """Delay before the retry following ``attempt`` (0-based)."""
    base = min(config.base_delay * (config.exponential_base ** attempt), config.max_delay)
    jitter = base * config.jitter_factor * (2 * rng() - 1)
    return max(0.0, base + jitter)


async def retry_with_backoff(
    func: Callable[..., Awaitable[T]],
    config: RetryConfig,
    *args: Any,
    sleep: Optional[Callable[[float], Awaitable[Any]]] = None,
    **kwargs: Any,
) -> T:
    """
    Await ``func(*args, **kwargs)``, retrying transient failures.

    Non-transient errors are re-raised unchanged on the first occurrence;
    the last transient error is re-raised once attempts are exhausted.
    """
    sleeper = sleep or asyncio.sleep
    attempts = max(1, config.max_attempts)

    for attempt in range(attempts):
        try:
            result = await func(*args, **kwargs)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            if not is_transient_error(e):
                raise
            if attempt == attempts - 1:
                logger.error(f"All {attempts} attempts failed: {e}")
                raise
            delay = backoff_delay(config, attempt)
            logger.warning(f"Attempt {attempt + 1}/{attempts} failed: {e}. Retrying in {delay:.2f}s...")
            await sleeper(delay)
        else:
            if attempt > 0:
                logger.info(f"Retry succeeded on attempt {attempt + 1}")
            return result

    raise RuntimeError("unreachable")  # pragma: no cover
