"""In-process sliding-window rate limiting keyed by client address."""
import logging
import math
import time
from collections import defaultdict, deque
from typing import Awaitable, Callable, DefaultDict, Deque, Hashable

from fastapi import HTTPException, Request, status

WindowBucket = Deque[float]

RATE_LIMIT_MESSAGE = "Too many requests, please try again later."


def _prune(bucket: WindowBucket, now: float, window_seconds: int) -> None:
    while bucket and now - bucket[0] > window_seconds:
        bucket.popleft()


def _enforce_limit(bucket: WindowBucket, limit: int, window_seconds: int, now: float) -> None:
    _prune(bucket, now, window_seconds)
    if len(bucket) >= limit:
        retry_after_seconds = 1
        if bucket:
            retry_after_seconds = max(1, int(math.ceil(bucket[0] + window_seconds - now)))
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=RATE_LIMIT_MESSAGE,
            headers={"Retry-After": str(retry_after_seconds)},
        )
    bucket.append(now)


def client_address(request: Request) -> str:
    """The socket peer's address. Client-supplied headers are ignored."""
    if request.client:
        return request.client.host
    return "unknown"


def forwarded_client_address(request: Request) -> str:
    """
    The right-most X-Forwarded-For hop, i.e. the address the trusted front end saw.

    Only use behind a proxy that appends to the header; earlier hops are client-controlled.
    """
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        hops = [hop.strip() for hop in forwarded.split(",") if hop.strip()]
        if hops:
            return hops[-1]
    return client_address(request)


def _sweep(buckets: DefaultDict[Hashable, WindowBucket], now: float, window_seconds: int) -> None:
    for ident in list(buckets):
        _prune(buckets[ident], now, window_seconds)
        if not buckets[ident]:
            del buckets[ident]


def per_client_limiter(
    limit: int,
    window_seconds: int,
    identifier_fn: Callable[[Request], Hashable] = client_address,
) -> Callable[[Request], Awaitable[None]]:
    """
    Rate limiter shared per-process, one bucket per client.

    Buckets with no hits inside the window are dropped once per window.

    Args:
        limit: max requests allowed in the window.
        window_seconds: rolling window length in seconds.
        identifier_fn: function that maps the request to a bucket key.
    """
    buckets: DefaultDict[Hashable, WindowBucket] = defaultdict(deque)
    last_sweep = time.time()

    async def dependency(request: Request) -> None:
        nonlocal last_sweep
        ident = identifier_fn(request)
        now = time.time()
        if now - last_sweep >= window_seconds:
            _sweep(buckets, now, window_seconds)
            last_sweep = now
        try:
            _enforce_limit(buckets[ident], limit, window_seconds, now)
        except HTTPException:
            logging.warning(f"Rate limit exceeded for client {ident}")
            raise

    dependency.buckets = buckets  # type: ignore[attr-defined]
    return dependency
