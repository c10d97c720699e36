"""
Caller-side retry for API calls. The transport itself never retries.

    page = await call_with_retry(api.list_booked_appointments, opts, policy=RetryPolicy(retries=4))

Retries ApiTransportError and ApiStatusError with a status in
`policy.retry_statuses`; every other ApiError (4xx, decode, empty result)
fails fast.
"""
from __future__ import annotations
import asyncio
import random
import sys
from typing import Any, Awaitable, Callable, Optional, TypeVar

from .errors import ApiError, ApiStatusError, ApiTransportError
from .utils import RETRY_STATUSES

T = TypeVar("T")


class RetryPolicy:
    def __init__(
        self,
        retries: int = 3,
        backoff_base: float = 0.25,
        backoff_cap: float = 4.0,
        retry_statuses: set[int] | None = None,
    ):
        self.retries = max(1, retries)
        self.backoff_base = backoff_base
        self.backoff_cap = backoff_cap
        self.retry_statuses = retry_statuses or set(RETRY_STATUSES)

    def sleep_seconds(self, attempt: int) -> float:
        # exponential (0.25, 0.5, 1, 2...) capped, + jitter [0..0.5]
        return min(self.backoff_cap, self.backoff_base * (2 ** (attempt - 1))) + random.uniform(0, 0.5)

    def should_retry(self, exc: ApiError) -> bool:
        if isinstance(exc, ApiTransportError):
            return True
        if isinstance(exc, ApiStatusError):
            return exc.http_status in self.retry_statuses
        return False


async def call_with_retry(
    fn: Callable[..., Awaitable[T]],
    *args: Any,
    policy: Optional[RetryPolicy] = None,
    label: Optional[str] = None,
    **kwargs: Any,
) -> T:
    policy = policy or RetryPolicy()
    label = label or getattr(fn, "__name__", "call")

    for attempt in range(1, policy.retries + 1):
        try:
            result = await fn(*args, **kwargs)
        except ApiError as e:
            if not policy.should_retry(e):
                raise
            if attempt >= policy.retries:
                print(f"[giving up] {label}: {e}", file=sys.stderr)
                raise
            sleep = policy.sleep_seconds(attempt)
            print(f"[retry {attempt}/{policy.retries}] {label} failed: {e}. "
                  f"Sleeping {sleep:.2f}s", file=sys.stderr)
            await asyncio.sleep(sleep)
            continue

        if attempt > 1:
            print(f"{label} succeeded after {attempt} attempt(s)", file=sys.stderr)
        return result

    raise RuntimeError("unreachable: retry loop exited without result")
