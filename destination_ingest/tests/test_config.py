import pytest

from destination_ingest.config import BoundingBox, Config, Environment, get_config, reset_config
from destination_ingest.src.normalizers import NormalizeContext


def test_defaults_reproduce_fixed_run():
    cfg = Config()
    assert cfg.environment == Environment.DEVELOPMENT
    assert cfg.region.city == "Kolkata"
    assert cfg.region.bbox == BoundingBox(22.4696, 88.3019, 22.6482, 88.4333)
    assert cfg.overpass.client_timeout == 30.0
    assert cfg.overpass.server_timeout == 25
    assert 1 / cfg.overpass.rate_per_second == 2.0
    assert cfg.output.directory == "./data/ingested"
    assert cfg.random_seed is None
    assert cfg.record_status == "active"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("INGEST_CITY", "Darjeeling")
    monkeypatch.setenv("INGEST_BBOX", "26.9,88.2,27.1,88.3")
    monkeypatch.setenv("OVERPASS_MAX_RETRIES", "5")
    monkeypatch.setenv("INGEST_RANDOM_SEED", "99")
    monkeypatch.setenv("INGEST_RECORD_STATUS", "Pending")
    cfg = Config()
    assert cfg.region.city == "Darjeeling"
    assert cfg.region.bbox.to_overpass() == "26.9,88.2,27.1,88.3"
    assert cfg.overpass.max_retries == 5
    assert cfg.random_seed == 99
    assert cfg.record_status == "pending"


@pytest.mark.parametrize("key, value", [
    ("OVERPASS_CLIENT_TIMEOUT", "0"),
    ("OVERPASS_MAX_RETRIES", "-1"),
    ("OVERPASS_RATE_PER_SECOND", "abc"),
    ("OVERPASS_URL", "ftp://overpass"),
    ("INGEST_RECORD_STATUS", "deleted"),
    ("INGEST_BBOX", "22.6,88.3,22.4,88.4"),
    ("ENVIRONMENT", "moon"),
])
def test_invalid_values_rejected(monkeypatch, key, value):
    monkeypatch.setenv(key, value)
    with pytest.raises(ValueError):
        Config()


@pytest.mark.parametrize("raw", ["1,2,3", "a,b,c,d", "5,5,5,5"])
def test_bbox_parse_errors(raw):
    with pytest.raises(ValueError):
        BoundingBox.parse(raw)


def test_get_config_is_cached(monkeypatch):
    first = get_config()
    monkeypatch.setenv("INGEST_CITY", "Siliguri")
    assert get_config() is first
    reset_config()
    assert get_config().region.city == "Siliguri"


def test_context_from_config_seeds_sampler(monkeypatch):
    monkeypatch.setenv("INGEST_RANDOM_SEED", "5")
    first = NormalizeContext.from_config()
    reset_config()
    second = NormalizeContext.from_config()
    assert first.sampler.rating(0, 10) == second.sampler.rating(0, 10)
