"""
Provider base interfaces and error types.

External data sources sit behind a small interface so the pipeline can be
driven by a fake in tests and the transport concerns (timeouts, retries,
throttling) stay inside the provider.
"""

from abc import ABC, abstractmethod
from typing import Optional, List, Dict, Any
from dataclasses import dataclass
import logging


@dataclass
class ProviderMetadata:
    """Metadata about a provider."""
    name: str
    version: str
    description: str
    endpoint: str
    rate_limit: Optional[float] = None  # requests per second


class Provider(ABC):
    """Base provider interface.

    All providers must implement this interface to ensure consistent
    behavior and proper integration with the pipeline.
    """

    def __init__(self):
        """Initialize the provider."""
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    async def search(self, query: str, **kwargs) -> List[Dict[str, Any]]:
        """Run a query against the provider.

        Args:
            query: Provider-specific query text
            **kwargs: Additional parameters

        Returns:
            List of raw result elements

        Raises:
            ProviderError: If the query fails
        """
        pass

    @abstractmethod
    def get_metadata(self) -> ProviderMetadata:
        """Get provider metadata."""
        pass


class ProviderError(Exception):
    """Base exception for provider errors."""

    def __init__(self, message: str, provider_name: Optional[str] = None, details: Optional[Dict] = None):
        """Initialize provider error.

        Args:
            message: Error message
            provider_name: Name of the provider that failed
            details: Additional error details
        """
        super().__init__(message)
        self.provider_name = provider_name
        self.details = details or {}


class ProviderNotAvailableError(ProviderError):
    """Raised when a provider cannot be reached."""
    pass


class ProviderRateLimitError(ProviderError):
    """Raised when provider rate limit is exceeded."""
    pass


class ProviderTimeoutError(ProviderError):
    """Raised when provider request times out."""
    pass


class ProviderResponseError(ProviderError):
    """Raised for non-success statuses and unusable response bodies."""

    def __init__(self, message: str, status: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.status = status
