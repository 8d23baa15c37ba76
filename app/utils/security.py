"""
Security utilities: admin token check and guest portal rate limiting
"""

import time
from collections import defaultdict
from typing import Callable, Dict, List, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.config import settings
from app.utils.responses import rate_limit_error

security = HTTPBearer()

def verify_admin_token(credentials: HTTPAuthorizationCredentials = Depends(security)):
    """Verify admin authentication token"""
    if credentials.credentials != settings.ADMIN_TOKEN:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid admin token"
        )
    return credentials.credentials

class RateLimiter:
    """Sliding-window request counter keyed by client.

    One instance lives on ``app.state``; tests can build their own with a fake
    clock or override ``get_rate_limiter``.
    """

    def __init__(self, limit: int, window_seconds: float = 60.0, clock: Callable[[], float] = time.monotonic):
        self.limit = limit
        self.window_seconds = window_seconds
        self.clock = clock
        self._requests: Dict[str, List[float]] = defaultdict(list)

    def check(self, key: str) -> bool:
        """Record a request for key and report whether it is within the limit"""
        now = self.clock()
        window_start = now - self.window_seconds

        recent = [t for t in self._requests[key] if t > window_start]
        self._requests[key] = recent

        if len(recent) >= self.limit:
            return False

        recent.append(now)
        return True

    def remaining(self, key: str) -> int:
        window_start = self.clock() - self.window_seconds
        return max(0, self.limit - sum(1 for t in self._requests.get(key, []) if t > window_start))

    def reset(self) -> None:
        self._requests.clear()

def get_rate_limiter(request: Request) -> RateLimiter:
    limiter: Optional[RateLimiter] = getattr(request.app.state, "rate_limiter", None)
    if limiter is None:
        limiter = RateLimiter(settings.RATE_LIMIT_PER_MINUTE)
        request.app.state.rate_limiter = limiter
    return limiter

def get_client_ip(request: Request) -> str:
    """Extract client IP from request"""
    # Check for forwarded IP first (for reverse proxy setups)
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip

    return request.client.host if request.client else "unknown"

def enforce_rate_limit(request: Request, limiter: RateLimiter = Depends(get_rate_limiter)) -> None:
    """Dependency rejecting guest portal requests over the per-minute limit"""
    if not limiter.check(get_client_ip(request)):
        rate_limit_error()
