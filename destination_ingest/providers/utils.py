"""
Shared utilities for provider modules.
"""
import aiohttp
from typing import Optional, Mapping
from contextlib import asynccontextmanager


@asynccontextmanager
async def get_session(session: Optional[aiohttp.ClientSession] = None):
    """Context manager for aiohttp session handling.

    If session is provided, yields it.
    If not, creates a new session and closes it after use.
    """
    if session is not None:
        yield session
    else:
        async with aiohttp.ClientSession() as new_session:
            yield new_session


def retry_after_seconds(headers: Optional[Mapping[str, str]]) -> Optional[float]:
    """Read a numeric ``Retry-After`` header.

    HTTP-date values are ignored; callers fall back to their own backoff.
    """
    if not headers:
        return None
    raw = headers.get("Retry-After")
    if raw is None:
        return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    return value if value >= 0 else None
