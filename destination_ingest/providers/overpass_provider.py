"""Overpass API access: category queries and the HTTP client.

Queries are plain Overpass QL unions over node/way/relation selectors inside a
fixed bounding box. The client posts the query text, validates the JSON body,
and owns throttling and retries so callers only see elements or a
``ProviderError``.
"""
from typing import Optional, List, Dict, Tuple, Any
import asyncio
import json
import logging
import random

import aiohttp

from destination_ingest.config import BoundingBox, OverpassConfig, get_config
from .base import (
    Provider,
    ProviderMetadata,
    ProviderError,
    ProviderNotAvailableError,
    ProviderRateLimitError,
    ProviderResponseError,
    ProviderTimeoutError,
)
from .rate_limiting import ExponentialBackoff, TokenBucket
from .utils import get_session, retry_after_seconds

logger = logging.getLogger(__name__)

OVERPASS_URL = "https://overpass-api.de/api/interpreter"

# (element type, tag selector) per category. Order is kept in the query text.
CATEGORY_SELECTORS: Dict[str, List[Tuple[str, str]]] = {
    "hotels": [
        ("node", '["tourism"="hotel"]'),
        ("node", '["tourism"="guest_house"]'),
        ("node", '["tourism"="hostel"]'),
        ("way", '["tourism"="hotel"]'),
        ("way", '["tourism"="guest_house"]'),
        ("way", '["tourism"="hostel"]'),
        ("relation", '["tourism"="hotel"]'),
    ],
    "restaurants": [
        ("node", '["amenity"="restaurant"]'),
        ("node", '["amenity"="cafe"]'),
        ("node", '["amenity"="fast_food"]'),
        ("node", '["amenity"="food_court"]'),
        ("way", '["amenity"="restaurant"]'),
        ("way", '["amenity"="cafe"]'),
        ("way", '["amenity"="fast_food"]'),
        ("relation", '["amenity"="restaurant"]'),
    ],
    "attractions": [
        ("node", '["tourism"="attraction"]'),
        ("node", '["tourism"="museum"]'),
        ("node", '["tourism"="gallery"]'),
        ("node", '["historic"]'),
        ("node", '["amenity"="place_of_worship"]'),
        ("node", '["leisure"="park"]'),
        ("way", '["tourism"="attraction"]'),
        ("way", '["tourism"="museum"]'),
        ("way", '["historic"]'),
        ("way", '["amenity"="place_of_worship"]'),
        ("way", '["leisure"="park"]'),
        ("relation", '["tourism"="attraction"]'),
    ],
    "sports": [
        (element, selector)
        for element in ("node", "way", "relation")
        for selector in (
            '["leisure"="pitch"]',
            '["leisure"="stadium"]',
            '["amenity"="sports_centre"]',
            '["club"="sport"]',
        )
    ],
}

QUERY_CATEGORIES = tuple(CATEGORY_SELECTORS)

RETRYABLE_STATUSES = {429, 502, 503, 504}


def build_query(category: str, bbox: Optional[BoundingBox] = None, timeout: int = 25) -> str:
    """Build the Overpass QL query for one listing category.

    Args:
        category: One of ``QUERY_CATEGORIES``
        bbox: Area to search; defaults to the configured region
        timeout: Server-side timeout in seconds

    Raises:
        ValueError: For an unknown category
    """
    try:
        selectors = CATEGORY_SELECTORS[category]
    except KeyError:
        raise ValueError(f"Unknown Overpass category: {category}")
    if bbox is None:
        bbox = get_config().region.bbox
    area = bbox.to_overpass()
    clauses = "\n".join(f"  {element}{selector}({area});" for element, selector in selectors)
    return (
        f"[out:json][timeout:{timeout}];\n"
        f"(\n{clauses}\n);\n"
        "out body;\n"
        ">;\n"
        "out skel qt;\n"
    )


class OverpassProvider(Provider):
    """Overpass API client with token-bucket throttling and retry/backoff."""

    def __init__(
        self,
        url: str = OVERPASS_URL,
        timeout: float = 30.0,
        rate_limiter: Optional[TokenBucket] = None,
        backoff: Optional[ExponentialBackoff] = None,
        session: Optional[aiohttp.ClientSession] = None,
        user_agent: str = "DestinationIngest/0.1",
    ):
        super().__init__()
        self.url = url
        self.timeout = timeout
        self.rate_limiter = rate_limiter or TokenBucket()
        self.backoff = backoff or ExponentialBackoff()
        self.session = session
        self.user_agent = user_agent

    @classmethod
    def from_config(
        cls,
        overpass: Optional[OverpassConfig] = None,
        rng: Optional[random.Random] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> "OverpassProvider":
        overpass = overpass or get_config().overpass
        return cls(
            url=overpass.url,
            timeout=overpass.client_timeout,
            rate_limiter=TokenBucket(overpass.rate_capacity, overpass.rate_per_second),
            backoff=ExponentialBackoff(
                max_retries=overpass.max_retries,
                base=overpass.backoff_base,
                maximum=overpass.backoff_max,
                rng=rng,
            ),
            session=session,
            user_agent=overpass.user_agent,
        )

    def get_metadata(self) -> ProviderMetadata:
        return ProviderMetadata(
            name="OpenStreetMap",
            version="overpass-api/0.7",
            description="OpenStreetMap points of interest via the Overpass API",
            endpoint=self.url,
            rate_limit=self.rate_limiter.refill_rate,
        )

    async def search(self, query: str, **kwargs) -> List[Dict[str, Any]]:
        """POST ``query`` and return the response's ``elements`` list.

        Retries throttling responses, gateway errors, timeouts and connection
        failures; everything else fails on the first attempt.
        """
        attempt = 0
        while True:
            await self.rate_limiter.acquire()
            try:
                return await self._post_once(query)
            except (ProviderRateLimitError, ProviderTimeoutError, ProviderNotAvailableError) as e:
                retryable, retry_after = True, e.details.get("retry_after")
                last_error: ProviderError = e
            except ProviderResponseError as e:
                retryable, retry_after = e.status in RETRYABLE_STATUSES, e.details.get("retry_after")
                last_error = e
            if not retryable or attempt >= self.backoff.max_retries:
                logger.error("Overpass request failed after %d attempt(s): %s", attempt + 1, last_error)
                raise last_error
            delay = await self.backoff.wait(attempt, retry_after)
            logger.warning(
                "Overpass attempt %d failed (%s); retried after %.1fs", attempt + 1, last_error, delay
            )
            attempt += 1

    async def _post_once(self, query: str) -> List[Dict[str, Any]]:
        headers = {"Content-Type": "text/plain", "User-Agent": self.user_agent}
        logger.debug("POST %s (%d bytes)", self.url, len(query))
        try:
            async with get_session(self.session) as session:
                async with session.post(
                    self.url,
                    data=query.encode("utf-8"),
                    headers=headers,
                    timeout=aiohttp.ClientTimeout(total=self.timeout),
                ) as resp:
                    status = resp.status
                    retry_after = retry_after_seconds(resp.headers)
                    body = await resp.text()
        except asyncio.TimeoutError:
            raise ProviderTimeoutError(
                f"Overpass request timed out after {self.timeout}s", provider_name="overpass"
            )
        except aiohttp.ClientError as e:
            raise ProviderNotAvailableError(f"Overpass request failed: {e}", provider_name="overpass")

        if status == 429:
            raise ProviderRateLimitError(
                "Overpass rate limit exceeded (HTTP 429)",
                provider_name="overpass",
                details={"status": status, "retry_after": retry_after},
            )
        if not 200 <= status < 300:
            raise ProviderResponseError(
                f"Overpass returned HTTP {status}",
                status=status,
                provider_name="overpass",
                details={"retry_after": retry_after, "body": body[:500]},
            )
        return parse_elements(body)


def parse_elements(body: str) -> List[Dict[str, Any]]:
    """Decode an Overpass JSON body into its element list.

    Raises:
        ProviderResponseError: If the body is not JSON or has no ``elements`` list
    """
    try:
        data = json.loads(body)
    except ValueError as e:
        raise ProviderResponseError(
            f"Overpass returned malformed JSON: {e}",
            provider_name="overpass",
            details={"body": body[:500]},
        )
    elements = data.get("elements") if isinstance(data, dict) else None
    if not isinstance(elements, list):
        raise ProviderResponseError(
            "Overpass response has no 'elements' list",
            provider_name="overpass",
            details={"body": body[:500]},
        )
    return elements
