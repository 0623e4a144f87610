"""Attraction listings: historic sites, places of worship, museums, galleries, parks."""

from typing import Dict, Iterable, List, Optional

from destination_ingest.config import RegionConfig
from destination_ingest.src.rules import Rule, has_tag, resolve, tag_equals
from .common import (
    Element,
    NormalizeContext,
    Record,
    base_record,
    finish_record,
    normalize_elements,
    yes_labels,
)

FALLBACK_NAME = "Unnamed Attraction"

ATTRACTION_RULES = [
    Rule("Historical", has_tag("historic")),
    Rule("Religious", tag_equals("amenity", "place_of_worship")),
    Rule("Museums", tag_equals("tourism", "museum", "gallery")),
    Rule("Parks", tag_equals("leisure", "park")),
    Rule("Architecture", tag_equals("building", "government")),
]
DEFAULT_ATTRACTION_CATEGORY = "Cultural"

# adult, child, senior
ENTRY_FEES = {
    "Historical": (10, 5, 5),
    "Religious": (0, 0, 0),
    "Museums": (20, 10, 10),
    "Parks": (5, 2, 2),
    "Architecture": (15, 8, 8),
    "Cultural": (50, 25, 25),
}

VISIT_DURATIONS = {
    "Historical": "1-2 hours",
    "Religious": "30-60 minutes",
    "Museums": "2-3 hours",
    "Parks": "1-3 hours",
    "Architecture": "30-60 minutes",
    "Cultural": "2-4 hours",
}

BEST_TIME_TO_VISIT = {
    "Parks": "Early morning or evening",
    "Religious": "Morning or evening prayers",
}
DEFAULT_BEST_TIME = "Any time during opening hours"

DESCRIPTIONS = {
    "Historical": "{name} is a significant historical site in {city}, showcasing the rich heritage of the city.",
    "Religious": "{name} is an important place of worship, offering spiritual solace to visitors.",
    "Museums": "{name} houses a fascinating collection of artifacts and exhibits.",
    "Parks": "{name} is a beautiful green space perfect for relaxation and recreation.",
    "Architecture": "{name} represents the architectural heritage of {city}.",
    "Cultural": "{name} is a vibrant cultural center celebrating the arts and traditions of {state}.",
}

TOUR_LANGUAGES = ["English", "Bengali", "Hindi"]

ATTRACTION_AMENITIES = [
    ("guided_tours", "Guided Tours"),
    ("audio_guide", "Audio Guide"),
    ("parking", "Parking"),
    ("wheelchair", "Wheelchair Access"),
    ("photography", "Photography"),
    ("shop", "Gift Shop"),
]


def categorize_attraction(tags) -> str:
    return resolve(ATTRACTION_RULES, tags, DEFAULT_ATTRACTION_CATEGORY)


def entry_fee(category: str, currency: str = "INR") -> Dict:
    adult, child, senior = ENTRY_FEES.get(category, ENTRY_FEES[DEFAULT_ATTRACTION_CATEGORY])
    return {
        "adult": adult,
        "child": child,
        "senior": senior,
        "currency": currency,
        "isFree": adult == 0 and child == 0 and senior == 0,
    }


def visit_duration(category: str) -> str:
    return VISIT_DURATIONS.get(category, "1-2 hours")


def best_time_to_visit(category: str) -> str:
    return BEST_TIME_TO_VISIT.get(category, DEFAULT_BEST_TIME)


def describe_attraction(name: str, category: str, region: RegionConfig) -> str:
    template = DESCRIPTIONS.get(category, "Visit {name} for a memorable experience in {city}.")
    return template.format(name=name, city=region.city, state=region.state)


def attraction_amenities(tags) -> List[str]:
    return yes_labels(tags, ATTRACTION_AMENITIES)


def normalize_attractions(elements: Iterable[Element], context: Optional[NormalizeContext] = None) -> List[Record]:
    context = context or NormalizeContext()
    sampler = context.sampler

    def build(element: Element, name: str) -> Record:
        tags = element["tags"]
        category = categorize_attraction(tags)
        description = tags.get("description") or describe_attraction(
            tags.get("name") or "attraction", category, context.region
        )
        record = base_record(element, name, description, context.region)
        record.update({
            "category": category,
            "entryFee": entry_fee(category, context.region.currency),
            "timings": context.hours_parser.parse(tags.get("opening_hours")),
            "bestTimeToVisit": best_time_to_visit(category),
            "duration": visit_duration(category),
            "guidedTours": {
                "available": sampler.chance(0.6),
                "languages": list(TOUR_LANGUAGES),
                "price": 100,
                "duration": "1 hour",
            },
            "accessibility": {
                "wheelchairAccessible": tags.get("wheelchair") == "yes",
                "parkingAvailable": sampler.chance(0.5),
                "publicTransport": "Metro, Bus available nearby",
            },
            "amenities": attraction_amenities(tags),
            "rating": sampler.rating(20, 500),
        })
        return finish_record(record, element, context)

    return normalize_elements(elements, build, FALLBACK_NAME)
