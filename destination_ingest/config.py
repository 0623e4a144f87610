"""
Centralized configuration management with validation and type conversion.

All tunables of the ingestion run live here instead of being scattered as
literals through the pipeline:
- Target region (bounding box, city/state labels, currency)
- Overpass endpoint, timeouts, retry and throttling budget
- Output location
- Logging
"""

import os
import logging
from typing import Optional, Dict, Any, NamedTuple
from dataclasses import dataclass
from enum import Enum

from dotenv import load_dotenv

load_dotenv()


class Environment(Enum):
    """Application environment types."""
    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"


RECORD_STATUSES = ("active", "pending")


class BoundingBox(NamedTuple):
    """Geographic bounding box in Overpass order (south, west, north, east)."""
    south: float
    west: float
    north: float
    east: float

    @classmethod
    def parse(cls, raw: str) -> "BoundingBox":
        """Parse a ``"south,west,north,east"`` string.

        Raises:
            ValueError: If the string does not hold four floats forming a
                non-empty box
        """
        parts = [p.strip() for p in raw.split(",") if p.strip()]
        if len(parts) != 4:
            raise ValueError(f"Invalid bounding box (need south,west,north,east): {raw}")
        try:
            south, west, north, east = (float(p) for p in parts)
        except ValueError:
            raise ValueError(f"Invalid bounding box (non-numeric value): {raw}")
        if south >= north or west >= east:
            raise ValueError(f"Invalid bounding box (empty extent): {raw}")
        return cls(south, west, north, east)

    def to_overpass(self) -> str:
        return f"{self.south},{self.west},{self.north},{self.east}"


DEFAULT_BBOX = "22.4696,88.3019,22.6482,88.4333"


@dataclass
class RegionConfig:
    """Region every ingested record is attributed to."""
    city: str = "Kolkata"
    state: str = "West Bengal"
    currency: str = "INR"
    bbox: BoundingBox = BoundingBox.parse(DEFAULT_BBOX)


@dataclass
class OverpassConfig:
    """Overpass API access settings."""
    url: str = "https://overpass-api.de/api/interpreter"
    client_timeout: float = 30.0
    server_timeout: int = 25
    max_retries: int = 3
    backoff_base: float = 2.0
    backoff_max: float = 60.0
    rate_capacity: float = 1.0
    rate_per_second: float = 0.5  # one request every 2 seconds
    user_agent: str = "DestinationIngest/0.1"


@dataclass
class OutputConfig:
    """Where normalized category files are written."""
    directory: str = "./data/ingested"
    report_filename: str = "ingestion-report.json"


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: Optional[str] = None
    max_bytes: int = 10485760  # 10MB
    backup_count: int = 5


class Config:
    """Centralized configuration with validation and type conversion."""

    def __init__(self):
        """Initialize configuration from environment variables."""
        self.environment = self._get_environment()
        self.debug = self._get_bool("DEBUG", False)

        self.region = RegionConfig(
            city=self._get_str("INGEST_CITY", "Kolkata"),
            state=self._get_str("INGEST_STATE", "West Bengal"),
            currency=self._get_str("INGEST_CURRENCY", "INR"),
            bbox=BoundingBox.parse(self._get_str("INGEST_BBOX", DEFAULT_BBOX)),
        )

        self.overpass = OverpassConfig(
            url=self._get_str("OVERPASS_URL", "https://overpass-api.de/api/interpreter"),
            client_timeout=self._get_float("OVERPASS_CLIENT_TIMEOUT", 30.0),
            server_timeout=self._get_int("OVERPASS_SERVER_TIMEOUT", 25),
            max_retries=self._get_int("OVERPASS_MAX_RETRIES", 3),
            backoff_base=self._get_float("OVERPASS_BACKOFF_BASE", 2.0),
            backoff_max=self._get_float("OVERPASS_BACKOFF_MAX", 60.0),
            rate_capacity=self._get_float("OVERPASS_RATE_CAPACITY", 1.0),
            rate_per_second=self._get_float("OVERPASS_RATE_PER_SECOND", 0.5),
            user_agent=self._get_str("OVERPASS_USER_AGENT", "DestinationIngest/0.1"),
        )

        self.output = OutputConfig(
            directory=self._get_str("INGEST_OUTPUT_DIR", "./data/ingested"),
            report_filename=self._get_str("INGEST_REPORT_FILE", "ingestion-report.json"),
        )

        self.logging_config = LoggingConfig(
            level=self._get_str("LOG_LEVEL", "INFO"),
            format=self._get_str("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
            file=self._get_optional("LOG_FILE"),
            max_bytes=self._get_int("LOG_MAX_BYTES", 10485760),
            backup_count=self._get_int("LOG_BACKUP_COUNT", 5),
        )

        # Unset means every run samples placeholders differently
        seed = self._get_optional("INGEST_RANDOM_SEED")
        self.random_seed: Optional[int] = self._get_int("INGEST_RANDOM_SEED", 0) if seed else None

        self.record_status = self._get_str("INGEST_RECORD_STATUS", "active").lower()

        self._validate()

    def _get_environment(self) -> Environment:
        """Get application environment."""
        env_str = self._get_str("ENVIRONMENT", "development").lower()
        try:
            return Environment(env_str)
        except ValueError:
            raise ValueError(f"Invalid environment: {env_str}")

    def _get_optional(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Get optional environment variable.

        Args:
            key: Environment variable name
            default: Default value if not found

        Returns:
            Environment variable value or default
        """
        return os.getenv(key, default)

    def _get_str(self, key: str, default: str) -> str:
        return os.getenv(key, default)

    def _get_int(self, key: str, default: int) -> int:
        """Get integer environment variable with default.

        Raises:
            ValueError: If value cannot be converted to int
        """
        value = os.getenv(key)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            raise ValueError(f"Invalid integer for {key}: {value}")

    def _get_float(self, key: str, default: float) -> float:
        """Get float environment variable with default.

        Raises:
            ValueError: If value cannot be converted to float
        """
        value = os.getenv(key)
        if value is None:
            return default
        try:
            return float(value)
        except ValueError:
            raise ValueError(f"Invalid float for {key}: {value}")

    def _get_bool(self, key: str, default: bool) -> bool:
        value = os.getenv(key)
        if value is None:
            return default
        return value.lower() in ('1', 'true', 'yes', 'on')

    def _validate(self):
        """Validate configuration values."""
        if self.overpass.client_timeout <= 0:
            raise ValueError(f"Invalid client timeout: {self.overpass.client_timeout}")
        if self.overpass.server_timeout <= 0:
            raise ValueError(f"Invalid server timeout: {self.overpass.server_timeout}")
        if self.overpass.max_retries < 0:
            raise ValueError(f"Invalid max retries: {self.overpass.max_retries}")
        if self.overpass.backoff_base < 0 or self.overpass.backoff_max < 0:
            raise ValueError("Backoff delays must not be negative")
        if self.overpass.rate_per_second <= 0 or self.overpass.rate_capacity <= 0:
            raise ValueError("Overpass rate limit must be positive")
        if not self.overpass.url.startswith(("http://", "https://")):
            raise ValueError(f"Invalid Overpass URL: {self.overpass.url}")
        if self.record_status not in RECORD_STATUSES:
            raise ValueError(f"Invalid record status: {self.record_status}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary for debugging and run reports."""
        return {
            'environment': self.environment.value,
            'region': {
                'city': self.region.city,
                'state': self.region.state,
                'currency': self.region.currency,
                'bbox': self.region.bbox.to_overpass(),
            },
            'overpass': {
                'url': self.overpass.url,
                'client_timeout': self.overpass.client_timeout,
                'server_timeout': self.overpass.server_timeout,
                'max_retries': self.overpass.max_retries,
                'rate_per_second': self.overpass.rate_per_second,
            },
            'output_dir': self.output.directory,
            'random_seed': self.random_seed,
            'record_status': self.record_status,
        }


_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global configuration instance, building it on first use.

    Returns:
        Configuration instance
    """
    global _config
    if _config is None:
        _config = Config()
    return _config


def reset_config() -> None:
    """Drop the cached configuration so the next ``get_config`` re-reads the environment."""
    global _config
    _config = None


def setup_logging(cfg: Optional[Config] = None):
    """Set up logging based on configuration."""
    from logging.handlers import RotatingFileHandler

    cfg = cfg or get_config()

    logging.basicConfig(
        level=getattr(logging, cfg.logging_config.level.upper(), logging.INFO),
        format=cfg.logging_config.format,
    )

    if cfg.logging_config.file:
        file_handler = RotatingFileHandler(
            cfg.logging_config.file,
            maxBytes=cfg.logging_config.max_bytes,
            backupCount=cfg.logging_config.backup_count,
        )
        file_handler.setFormatter(logging.Formatter(cfg.logging_config.format))
        logging.getLogger().addHandler(file_handler)

    logging.getLogger('aiohttp').setLevel(logging.WARNING)
    logging.getLogger('asyncio').setLevel(logging.WARNING)

    if cfg.debug:
        logging.getLogger().setLevel(logging.DEBUG)
