"""
Pytest configuration for destination_ingest tests.

Fixtures: default configuration for every test, an Overpass client wired to
a fake session, and a seeded normalization context.
"""
import os
import random

import pytest

from destination_ingest.config import reset_config
from destination_ingest.providers.overpass_provider import OverpassProvider
from destination_ingest.providers.rate_limiting import ExponentialBackoff, TokenBucket
from destination_ingest.src.normalizers import NormalizeContext, PlaceholderSampler

from .fakes import FakeSession, RecordingSleep

ENV_PREFIXES = ("INGEST_", "OVERPASS_", "LOG_")


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Each test starts from default configuration."""
    for key in list(os.environ):
        if key.startswith(ENV_PREFIXES) or key in ("ENVIRONMENT", "DEBUG"):
            monkeypatch.delenv(key, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture
def make_provider(recording_sleep):
    """Build an ``OverpassProvider`` over a ``FakeSession`` with instant sleeps."""
    def _make(outcomes, max_retries=3):
        session = FakeSession(outcomes)
        provider = OverpassProvider(
            url="https://overpass.test/api/interpreter",
            timeout=30.0,
            rate_limiter=TokenBucket(capacity=1.0, refill_rate=0.5, clock=lambda: 0.0, sleep=recording_sleep),
            backoff=ExponentialBackoff(
                max_retries=max_retries, base=2.0, maximum=60.0,
                rng=random.Random(1), sleep=recording_sleep,
            ),
            session=session,
        )
        return provider, session
    return _make


@pytest.fixture
def context():
    return NormalizeContext(sampler=PlaceholderSampler.seeded(42))
