"""
Utility functions for Adelia.
"""

from __future__ import annotations

import asyncio
import hashlib
import time
import uuid
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, TypeVar

import orjson

T = TypeVar("T")


def generate_request_id() -> str:
    """Generate a unique request ID."""
    return str(uuid.uuid4())


def generate_creative_id() -> str:
    """Generate a compact unique creative ID."""
    return uuid.uuid4().hex


def current_datetime() -> datetime:
    """Get current datetime in UTC."""
    return datetime.now(timezone.utc)


def current_date() -> str:
    """Get current UTC date as string (YYYY-MM-DD)."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%d")


def hash_string(s: str) -> str:
    """Hash a string using SHA-256."""
    return hashlib.sha256(s.encode()).hexdigest()


def stable_seed(*parts: str) -> int:
    """Derive a deterministic integer seed from string parts."""
    return int(hash_string("\x1f".join(parts))[:16], 16)


def json_dumps(obj: Any) -> str:
    """Fast JSON serialization using orjson."""
    return orjson.dumps(obj).decode("utf-8")


def json_dumps_pretty(obj: Any) -> str:
    """Indented, key-sorted JSON for files meant to be read by people."""
    return orjson.dumps(obj, option=orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS).decode("utf-8")


def json_loads(s: str | bytes) -> Any:
    """Fast JSON deserialization using orjson."""
    return orjson.loads(s)


class Timer:
    """Context manager for timing code blocks."""

    def __init__(self, name: str = ""):
        self.name = name
        self.start_time: float = 0
        self.end_time: float = 0

    def __enter__(self) -> "Timer":
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, *args: Any) -> None:
        self.end_time = time.perf_counter()

    @property
    def elapsed_ms(self) -> float:
        """Get elapsed time in milliseconds."""
        return (self.end_time - self.start_time) * 1000

    @property
    def elapsed_s(self) -> float:
        """Get elapsed time in seconds."""
        return self.end_time - self.start_time


async def retry_async(
    func: Callable[[], Awaitable[T]],
    max_attempts: int = 3,
    delay: float = 0.1,
    backoff: float = 2.0,
    exceptions: tuple[type[Exception], ...] = (Exception,),
) -> T:
    """
    Await ``func()`` until it succeeds or attempts run out.

    Args:
        func: Zero-argument coroutine factory.
        max_attempts: Maximum number of attempts.
        delay: Initial delay between retries in seconds.
        backoff: Multiplier for delay on each retry.
        exceptions: Tuple of exceptions to catch.

    Raises:
        The last exception raised by ``func``.
    """
    current_delay = delay
    attempts = max(1, max_attempts)

    for attempt in range(attempts):
        try:
            return await func()
        except exceptions:
            if attempt == attempts - 1:
                raise
            if current_delay > 0:
                await asyncio.sleep(current_delay)
            current_delay *= backoff

    raise AssertionError("unreachable")

