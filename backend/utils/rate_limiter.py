import os
import time
from collections import defaultdict, deque
from typing import Deque, Dict

from fastapi import Request, HTTPException, status


class RateLimiter:
    """Sliding-window request limiter keyed by client IP, usable as a FastAPI dependency."""

    def __init__(self, requests_limit: int, time_window: int):
        self.requests_limit = requests_limit
        self.time_window = time_window  # in seconds
        self.ip_requests: Dict[str, Deque[float]] = defaultdict(deque)

    def _get_client_ip(self, request: Request) -> str:
        # X-Forwarded-For: <client>, <proxy1>, <proxy2>
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()
        if request.client and request.client.host:
            return request.client.host
        return "127.0.0.1"

    async def __call__(self, request: Request):
        client_ip = self._get_client_ip(request)
        now = time.monotonic()

        timestamps = self.ip_requests[client_ip]
        while timestamps and now - timestamps[0] >= self.time_window:
            timestamps.popleft()

        if len(timestamps) >= self.requests_limit:
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail="Too many requests. Please try again later."
            )

        timestamps.append(now)
        return True

    def reset(self):
        self.ip_requests.clear()


# Login and registration attempts per client per window
# Note: In a real distributed system, use Redis. For this app, memory is fine.
auth_rate_limiter = RateLimiter(
    requests_limit=int(os.environ.get("AUTH_RATE_LIMIT", "5")),
    time_window=int(os.environ.get("AUTH_RATE_WINDOW", "60"))
)

# Profile updates and account deletion per client per window
profile_update_rate_limiter = RateLimiter(
    requests_limit=int(os.environ.get("PROFILE_RATE_LIMIT", "5")),
    time_window=int(os.environ.get("PROFILE_RATE_WINDOW", "60"))
)
