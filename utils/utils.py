"""
utils.py — Shared helpers: retry decorator, date math.
"""

import time
import logging
from datetime import date, datetime, timezone
from functools import wraps

from config import RETRY_DELAY, RETRY_MAX_ATTEMPTS

logger = logging.getLogger(__name__)


# ─── Retry Decorator ─────────────────────────────────────────────────────────

def retry(max_attempts: int = RETRY_MAX_ATTEMPTS, delay: float = RETRY_DELAY, exceptions=(Exception,)):
    """
    Decorator: retry a function up to `max_attempts` times on specified exceptions.
    Uses linear backoff: delay, delay*2, delay*3, ...
    The last failure is re-raised unchanged.
    """
    def decorator(func):
        name = getattr(func, "__qualname__", repr(func))

        @wraps(func)
        def wrapper(*args, **kwargs):
            last_exc = None
            for attempt in range(1, max_attempts + 1):
                try:
                    return func(*args, **kwargs)
                except exceptions as exc:
                    last_exc = exc
                    if attempt < max_attempts:
                        sleep_time = delay * attempt
                        logger.warning(
                            f"[retry] {name} attempt {attempt}/{max_attempts} failed: {exc}. "
                            f"Retrying in {sleep_time:.1f}s..."
                        )
                        time.sleep(sleep_time)
                    else:
                        logger.error(
                            f"[retry] {name} failed after {max_attempts} attempts."
                        )
            raise last_exc
        return wrapper
    return decorator


# ─── Date Helpers ─────────────────────────────────────────────────────────────

def parse_github_date(date_str: str | None) -> datetime | None:
    """Parse a GitHub ISO-8601 date string to a timezone-aware datetime."""
    if not date_str:
        return None
    try:
        return datetime.fromisoformat(date_str.replace("Z", "+00:00"))
    except ValueError:
        return None


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def today_iso() -> str:
    """Today's date in UTC as YYYY-MM-DD."""
    return utc_now().date().isoformat()


def start_of_day_utc(day: str) -> datetime:
    """Midnight UTC at the start of an ISO calendar date."""
    d = date.fromisoformat(day)
    return datetime(d.year, d.month, d.day, tzinfo=timezone.utc)


def since_param(day: str) -> str:
    """Format an ISO date as the `since` query value GitHub expects."""
    return f"{day}T00:00:00Z"


def days_between(start: datetime | None, end: datetime | None) -> float:
    """Fractional days from `start` to `end` (0.0 when either is missing)."""
    if start is None or end is None:
        return 0.0
    return (end - start).total_seconds() / 86400


# ─── Misc ────────────────────────────────────────────────────────────────────

def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """Divide safely, returning `default` when denominator is zero."""
    if denominator == 0:
        return default
    return numerator / denominator
