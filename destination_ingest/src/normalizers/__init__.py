"""Per-category transformations from raw OSM elements to listing records."""
from .common import NormalizeContext, PlaceholderSampler  # noqa: F401
from .hotels import normalize_hotels  # noqa: F401
from .restaurants import normalize_restaurants  # noqa: F401
from .attractions import normalize_attractions  # noqa: F401
from .sports import normalize_sports  # noqa: F401
