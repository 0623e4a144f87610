import asyncio

import aiohttp
import pytest

from destination_ingest.config import OverpassConfig
from destination_ingest.providers.base import (
    ProviderNotAvailableError,
    ProviderRateLimitError,
    ProviderResponseError,
    ProviderTimeoutError,
)
from destination_ingest.providers.overpass_provider import OverpassProvider, parse_elements

from .fakes import FakeResponse, overpass_body

ELEMENTS = [{"type": "node", "id": 1, "lat": 22.57, "lon": 88.36, "tags": {"name": "Grand Hotel"}}]


@pytest.mark.asyncio
async def test_search_posts_plain_text_query(make_provider):
    provider, session = make_provider([FakeResponse(200, overpass_body(ELEMENTS))])

    result = await provider.search("[out:json];node(1,2,3,4);out;")

    assert result == ELEMENTS
    call = session.calls[0]
    assert call["url"] == "https://overpass.test/api/interpreter"
    assert call["data"] == b"[out:json];node(1,2,3,4);out;"
    assert call["headers"]["Content-Type"] == "text/plain"
    assert call["timeout"].total == 30.0


@pytest.mark.asyncio
async def test_gateway_errors_are_retried(make_provider, recording_sleep):
    provider, session = make_provider([
        FakeResponse(503, "busy"),
        FakeResponse(504, "gateway timeout"),
        FakeResponse(200, overpass_body(ELEMENTS)),
    ])

    assert await provider.search("q") == ELEMENTS
    assert len(session.calls) == 3
    # two backoff sleeps; the first token is free and later ones are paid for in 2 s waits
    backoff_delays = [d for d in recording_sleep.delays if d != 2.0]
    assert len(backoff_delays) == 2
    assert 2.0 < backoff_delays[0] <= 2.2
    assert 4.0 < backoff_delays[1] <= 4.4


@pytest.mark.asyncio
async def test_retry_after_header_wins(make_provider, recording_sleep):
    provider, session = make_provider([
        FakeResponse(429, "slow down", headers={"Retry-After": "7"}),
        FakeResponse(200, overpass_body([])),
    ])

    assert await provider.search("q") == []
    assert 7.0 in recording_sleep.delays


@pytest.mark.asyncio
async def test_rate_limit_exhausts_retries(make_provider):
    provider, session = make_provider([FakeResponse(429, "slow down")] * 3, max_retries=2)

    with pytest.raises(ProviderRateLimitError):
        await provider.search("q")
    assert len(session.calls) == 3


@pytest.mark.asyncio
async def test_client_error_status_fails_immediately(make_provider):
    provider, session = make_provider([FakeResponse(400, "parse error")])

    with pytest.raises(ProviderResponseError) as excinfo:
        await provider.search("q")
    assert excinfo.value.status == 400
    assert len(session.calls) == 1


@pytest.mark.asyncio
async def test_malformed_json_is_not_retried(make_provider):
    provider, session = make_provider([FakeResponse(200, "<html>oops</html>")])

    with pytest.raises(ProviderResponseError):
        await provider.search("q")
    assert len(session.calls) == 1


@pytest.mark.asyncio
async def test_timeouts_retry_then_raise(make_provider):
    provider, session = make_provider([asyncio.TimeoutError()] * 2, max_retries=1)

    with pytest.raises(ProviderTimeoutError):
        await provider.search("q")
    assert len(session.calls) == 2


@pytest.mark.asyncio
async def test_connection_error_recovers(make_provider):
    provider, session = make_provider([
        aiohttp.ClientConnectionError("refused"),
        FakeResponse(200, overpass_body(ELEMENTS)),
    ])

    assert await provider.search("q") == ELEMENTS


@pytest.mark.asyncio
async def test_connection_error_mapped(make_provider):
    provider, _ = make_provider([aiohttp.ClientConnectionError("refused")], max_retries=0)

    with pytest.raises(ProviderNotAvailableError):
        await provider.search("q")


def test_parse_elements_requires_list():
    with pytest.raises(ProviderResponseError):
        parse_elements('{"remark": "runtime error"}')
    with pytest.raises(ProviderResponseError):
        parse_elements('{"elements": {}}')
    assert parse_elements('{"elements": []}') == []


def test_from_config_uses_overpass_settings():
    provider = OverpassProvider.from_config(OverpassConfig(
        url="https://example.test/api", client_timeout=12.0, max_retries=5, rate_per_second=0.25,
    ))
    assert provider.url == "https://example.test/api"
    assert provider.timeout == 12.0
    assert provider.backoff.max_retries == 5
    assert provider.rate_limiter.refill_rate == 0.25
    metadata = provider.get_metadata()
    assert metadata.name == "OpenStreetMap"
    assert metadata.endpoint == "https://example.test/api"
