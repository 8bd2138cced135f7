"""
Rate Limiter for Provider Calls
Fixed-window request cap per provider, so one chatty canvas can't burn the shared quota.

A rejection is a local decision: no call goes out, nothing is counted,
and the provider's circuit is left alone.
"""
from utils import get_logger
from utils.errors import RateLimitExceededError
from .provider_state import ProviderStateRegistry, get_provider_state

logger = get_logger(__name__)


class RateLimiter:
    """
    Per-provider fixed window.

    Defaults come from settings (60 requests per 60 seconds) via the
    provider state registry.
    """

    def __init__(self, state: ProviderStateRegistry | None = None):
        self.state = state or get_provider_state()

    def check_rate(self, provider: str) -> bool:
        """
        Count one request against the provider's window.
        Returns False (and counts nothing) when the window is full.
        """
        record = self.state.get(provider)
        with record.lock:
            window = record.window
            now = self.state.clock()

            # Expired window is replaced before counting
            if now - window.window_start >= window.window_size:
                window.window_start = now
                window.request_count = 0

            if window.request_count >= window.limit:
                retry_after = window.window_start + window.window_size - now
                logger.warning(
                    f"Rate limit: {provider} at {window.request_count}/{window.limit}, "
                    f"window resets in {retry_after:.1f}s"
                )
                return False

            window.request_count += 1
            return True

    def require(self, provider: str) -> None:
        """check_rate that raises RateLimitExceededError instead of returning False"""
        if not self.check_rate(provider):
            raise RateLimitExceededError(provider, retry_after=self.retry_after(provider))

    def retry_after(self, provider: str) -> float:
        record = self.state.get(provider)
        with record.lock:
            window = record.window
            return max(0.0, window.window_start + window.window_size - self.state.clock())

    def reset(self, provider: str) -> None:
        """Operator reset: start a fresh, empty window"""
        record = self.state.get(provider)
        with record.lock:
            record.window.window_start = self.state.clock()
            record.window.request_count = 0
        logger.info(f"Rate limiter reset for {provider}")

    def get_usage_stats(self, provider: str) -> dict:
        """Get current usage statistics"""
        record = self.state.get(provider)
        with record.lock:
            window = record.window
            now = self.state.clock()
            expired = now - window.window_start >= window.window_size
            count = 0 if expired else window.request_count
            resets_in = window.window_size if expired else window.window_start + window.window_size - now

        return {
            "requests_this_window": count,
            "limit": window.limit,
            "remaining": max(0, window.limit - count),
            "window_seconds": window.window_size,
            "resets_in_seconds": round(max(0.0, resets_in), 1),
        }


# Singleton instance
_rate_limiter: RateLimiter | None = None


def get_rate_limiter() -> RateLimiter:
    """Get or create rate limiter singleton"""
    global _rate_limiter
    if _rate_limiter is None:
        _rate_limiter = RateLimiter()
    return _rate_limiter
