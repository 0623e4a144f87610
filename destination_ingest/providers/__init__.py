"""External data providers."""
from .base import (  # noqa: F401
    Provider,
    ProviderError,
    ProviderNotAvailableError,
    ProviderRateLimitError,
    ProviderResponseError,
    ProviderTimeoutError,
)
from .overpass_provider import OverpassProvider, build_query, QUERY_CATEGORIES  # noqa: F401
