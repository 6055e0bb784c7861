"""Bearer-token checks and a per-IP upload rate limiter."""
import hmac
import threading
import time
from typing import Dict, Optional, Tuple

from errors import RateLimited, Unauthorized

BEARER_PREFIX = "Bearer "


def tokens_match(provided: str, expected: str) -> bool:
    """Constant-time comparison of two secrets."""
    return hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))


def require_token(authorization: Optional[str], expected: str) -> None:
    """Raise Unauthorized unless the header carries the expected bearer token.

    Every failure produces the same error so callers cannot tell a missing
    header from a wrong token.
    """
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise Unauthorized()
    if not tokens_match(authorization[len(BEARER_PREFIX):], expected):
        raise Unauthorized()


class RateLimiter:
    """Fixed-window counter: at most `limit` hits per client per `window` seconds."""

    def __init__(self, limit: int, window: float, clock=time.monotonic):
        self.limit = limit
        self.window = window
        self._clock = clock
        self._lock = threading.Lock()
        self._hits: Dict[str, Tuple[float, int]] = {}

    def hit(self, client: str) -> None:
        now = self._clock()
        with self._lock:
            start, count = self._hits.get(client, (now, 0))
            if now - start >= self.window:
                start, count = now, 0
            count += 1
            self._hits[client] = (start, count)
            if len(self._hits) > 10_000:
                self._prune(now)
        if count > self.limit:
            retry_after = max(1, int(start + self.window - now))
            raise RateLimited(retry_after=retry_after)

    def _prune(self, now: float) -> None:
        expired = [k for k, (start, _) in self._hits.items() if now - start >= self.window]
        for k in expired:
            del self._hits[k]
