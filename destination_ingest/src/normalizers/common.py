"""
Building blocks shared by the category normalizers.

Every normalized record carries the same skeleton: GeoJSON location, address,
contact block, search tags and the bookkeeping fields (status, featured,
promoted, osmId, source, slug). Placeholder values (ratings, featured flags)
come from ``PlaceholderSampler`` so a seeded generator makes runs repeatable.
"""

import random
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from slugify import slugify

from destination_ingest.config import Config, RegionConfig, get_config
from destination_ingest.src.opening_hours import OpeningHoursParser, StaticOpeningHoursParser

Element = Mapping[str, Any]
Record = Dict[str, Any]
Tags = Mapping[str, str]

SOURCE = "OpenStreetMap"
SHORT_DESCRIPTION_LENGTH = 200

PHONE_KEYS = ("phone", "contact:phone", "phone:main", "contact:phone:main", "operator:phone", "brand:phone")
EMAIL_KEYS = ("email", "contact:email", "email:main", "contact:email:main", "operator:email", "brand:email")
WEBSITE_KEYS = ("website", "contact:website", "url", "contact:url", "operator:website", "brand:website")

# Illustrative nightly / per-meal prices, keyed by the OSM tourism or amenity value.
PRICE_TABLE: Dict[str, Dict[str, int]] = {
    "hotel": {"min": 1500, "max": 8000, "avg": 3500},
    "guest_house": {"min": 800, "max": 3000, "avg": 1800},
    "hostel": {"min": 500, "max": 1500, "avg": 900},
    "restaurant": {"min": 200, "max": 1000, "avg": 500},
    "cafe": {"min": 100, "max": 400, "avg": 250},
    "fast_food": {"min": 80, "max": 300, "avg": 150},
}
DEFAULT_PRICE_KIND = "restaurant"


class PlaceholderSampler:
    """Source of the intentionally random placeholder fields."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    @classmethod
    def seeded(cls, seed: Optional[int]) -> "PlaceholderSampler":
        return cls(random.Random(seed))

    def rating(self, count_base: int, count_span: int) -> Dict[str, Any]:
        """Average in [3, 5] (one decimal) and a review count in [base, base + span)."""
        return {
            "average": round(self.rng.random() * 2 + 3, 1),
            "count": count_base + self.rng.randrange(count_span),
        }

    def chance(self, threshold: float) -> bool:
        """True with probability ``1 - threshold``."""
        return self.rng.random() > threshold


@dataclass
class NormalizeContext:
    region: RegionConfig = field(default_factory=RegionConfig)
    sampler: PlaceholderSampler = field(default_factory=PlaceholderSampler)
    hours_parser: OpeningHoursParser = field(default_factory=StaticOpeningHoursParser)
    status: str = "active"

    @classmethod
    def from_config(cls, cfg: Optional[Config] = None, seed: Optional[int] = None) -> "NormalizeContext":
        cfg = cfg or get_config()
        if seed is None:
            seed = cfg.random_seed
        return cls(
            region=cfg.region,
            sampler=PlaceholderSampler.seeded(seed),
            status=cfg.record_status,
        )


def is_eligible(element: Element) -> bool:
    """Only elements with coordinates and at least one tag can become records."""
    return (
        element.get("lat") is not None
        and element.get("lon") is not None
        and bool(element.get("tags"))
    )


def point(element: Element) -> Dict[str, Any]:
    # GeoJSON order: longitude first
    return {"type": "Point", "coordinates": [element["lon"], element["lat"]]}


def address(tags: Tags, region: RegionConfig) -> Dict[str, str]:
    return {
        "street": tags.get("addr:street", ""),
        "area": tags.get("addr:suburb") or tags.get("addr:district") or "",
        "city": region.city,
        "state": region.state,
        "pincode": tags.get("addr:postcode", ""),
        "landmark": tags.get("landmark", ""),
    }


def first_tag(tags: Tags, keys: Iterable[str]) -> str:
    for key in keys:
        if tags.get(key):
            return tags[key]
    return ""


def phones(tags: Tags) -> List[str]:
    seen: List[str] = []
    for key in PHONE_KEYS:
        value = tags.get(key)
        if value and value not in seen:
            seen.append(value)
    return seen


def contact(tags: Tags) -> Dict[str, Any]:
    return {
        "phone": phones(tags),
        "email": first_tag(tags, EMAIL_KEYS),
        "website": first_tag(tags, WEBSITE_KEYS),
        "socialMedia": {},
    }


def collect_tags(tags: Tags) -> List[str]:
    """Free-text labels for search: locality, heritage flag, tourism/amenity type."""
    labels = [
        tags.get("addr:suburb", ""),
        tags.get("addr:district", ""),
        "Heritage" if tags.get("heritage") == "yes" else "",
        tags.get("tourism", ""),
        tags.get("amenity", ""),
    ]
    return [label for label in labels if label]


def short_description(tags: Tags) -> str:
    return (tags.get("description") or "")[:SHORT_DESCRIPTION_LENGTH]


def estimate_price(kind: Optional[str], field_name: str) -> int:
    """Static price for ``kind`` (``min``/``max``/``avg``); unknown kinds use restaurant pricing."""
    row = PRICE_TABLE.get(kind or "", PRICE_TABLE[DEFAULT_PRICE_KIND])
    return row[field_name]


def yes_labels(tags: Tags, checks: Iterable[tuple]) -> List[str]:
    """Labels whose tag key (or any of several keys) is ``"yes"``.

    ``checks`` holds ``(keys, label)`` pairs where ``keys`` is a key or a tuple of keys.
    """
    labels = []
    for keys, label in checks:
        if isinstance(keys, str):
            keys = (keys,)
        if any(tags.get(key) == "yes" for key in keys):
            labels.append(label)
    return labels


def base_record(element: Element, name: str, description: str, region: RegionConfig) -> Record:
    tags = element["tags"]
    return {
        "name": name,
        "description": description,
        "shortDescription": short_description(tags),
        "location": point(element),
        "address": address(tags, region),
        "contact": contact(tags),
    }


def finish_record(
    record: Record,
    element: Element,
    context: NormalizeContext,
    featured_threshold: float = 0.8,
    promoted_threshold: float = 0.9,
) -> Record:
    featured = context.sampler.chance(featured_threshold)
    promoted = context.sampler.chance(promoted_threshold)
    # Records awaiting review are never highlighted.
    if context.status == "pending":
        featured = promoted = False
    record.update({
        "tags": collect_tags(element["tags"]),
        "status": context.status,
        "featured": featured,
        "promoted": promoted,
        "osmId": element.get("id"),
        "source": SOURCE,
        "slug": make_slug(record["name"], element.get("id")),
    })
    return record


def make_slug(name: str, osm_id: Any = None) -> str:
    slug = slugify(name or "")
    if osm_id is None:
        return slug
    return f"{slug}-{osm_id}" if slug else str(osm_id)


def normalize_elements(
    elements: Iterable[Element],
    build: Callable[[Element, str], Record],
    fallback_name: str,
) -> List[Record]:
    """Filter eligible elements, build a record for each, drop the unnamed ones.

    ``build`` receives the element and its display name (the fallback literal
    when the element has no ``name`` tag).
    """
    records = [
        build(element, element["tags"].get("name") or fallback_name)
        for element in elements
        if is_eligible(element)
    ]
    return [record for record in records if record["name"] != fallback_name]
