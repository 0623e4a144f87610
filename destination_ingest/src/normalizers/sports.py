"""Sports facility listings: stadiums, pitches, sports centres and clubs."""

from typing import Dict, Iterable, List, Optional

from destination_ingest.config import RegionConfig
from destination_ingest.src.rules import Rule, leading_int, resolve, tag_equals
from .common import (
    Element,
    NormalizeContext,
    Record,
    base_record,
    finish_record,
    normalize_elements,
    yes_labels,
)

FALLBACK_NAME = "Unnamed Sports Facility"

SPORTS_RULES = [
    Rule("Stadium", tag_equals("leisure", "stadium")),
    Rule("Sports Grounds", tag_equals("leisure", "pitch")),
    Rule("Coaching Centers", tag_equals("amenity", "sports_centre")),
    Rule("Sports Clubs", tag_equals("club", "sport")),
]
DEFAULT_SPORTS_CATEGORY = "Sports Facilities"

SPORT_TYPE_RULES = [
    Rule("football", tag_equals("leisure", "pitch")),
    Rule("cricket", tag_equals("leisure", "stadium")),
    Rule("multi-sport", tag_equals("amenity", "sports_centre")),
    Rule("multi-sport", tag_equals("club", "sport")),
]

CAPACITY_RULES = [
    Rule(50000, tag_equals("leisure", "stadium")),
    Rule(1000, tag_equals("leisure", "pitch")),
    Rule(200, tag_equals("amenity", "sports_centre")),
    Rule(500, tag_equals("club", "sport")),
]
DEFAULT_CAPACITY = 100

# adult, child, senior
SPORTS_FEES = {
    "Stadium": (100, 50, 50),
    "Sports Grounds": (20, 10, 10),
    "Coaching Centers": (500, 300, 300),
    "Sports Clubs": (200, 100, 100),
    "Sports Facilities": (50, 25, 25),
}

SPORTS_DURATIONS = {
    "Stadium": "2-4 hours",
    "Sports Grounds": "1-2 hours",
    "Coaching Centers": "1-2 hours per session",
    "Sports Clubs": "1-3 hours",
    "Sports Facilities": "1-2 hours",
}

BEST_TIME_FOR_SPORTS = {
    "Stadium": "Evening matches, daytime practice",
    "Sports Grounds": "Morning and evening",
    "Coaching Centers": "Morning and evening sessions",
    "Sports Clubs": "All day with peak hours in evening",
}

DESCRIPTIONS = {
    "Stadium": "{name} is a premier sports stadium in {city}, hosting major sporting events and matches.",
    "Sports Grounds": "{name} is a well-maintained sports ground perfect for {sport} and recreational activities.",
    "Coaching Centers": "{name} is a professional coaching center offering training in {sport} and fitness programs.",
    "Sports Clubs": "{name} is a sports club providing facilities and training for {sport} enthusiasts.",
    "Sports Facilities": "{name} offers excellent sports facilities for {sport} in {city}.",
}

FACILITY_FLAGS = [
    ("lit", "Floodlights"),
    ("covered", "Covered facility"),
    ("changing_room", "Changing rooms"),
    ("shower", "Showers"),
    ("parking", "Parking"),
]

SPORTS_AMENITIES = [
    (("internet_access", "wifi"), "WiFi"),
    ("parking", "Parking"),
    ("changing_room", "Changing Rooms"),
    ("shower", "Showers"),
    ("toilets", "Toilets"),
    ("drinking_water", "Drinking Water"),
    ("first_aid", "First Aid"),
    ("lit", "Floodlights"),
]


def categorize_sports(tags) -> str:
    return resolve(SPORTS_RULES, tags, DEFAULT_SPORTS_CATEGORY)


def sport_type(tags) -> str:
    return tags.get("sport") or resolve(SPORT_TYPE_RULES, tags, "general")


def estimate_capacity(tags) -> int:
    """``capacity`` tag when it parses, otherwise a per-facility estimate."""
    capacity = leading_int(tags.get("capacity"))
    if capacity is not None:
        return capacity
    return resolve(CAPACITY_RULES, tags, DEFAULT_CAPACITY)


def sports_facilities(tags) -> List[str]:
    facilities = []
    if tags.get("sport"):
        facilities.append(tags["sport"])
    if tags.get("surface"):
        facilities.append(f"{tags['surface']} surface")
    facilities.extend(yes_labels(tags, FACILITY_FLAGS))
    return facilities


def sports_entry_fee(category: str, currency: str = "INR") -> Dict:
    adult, child, senior = SPORTS_FEES.get(category, SPORTS_FEES[DEFAULT_SPORTS_CATEGORY])
    return {"adult": adult, "child": child, "senior": senior, "currency": currency, "isFree": False}


def best_time_for_sports(category: str) -> str:
    return BEST_TIME_FOR_SPORTS.get(category, "Morning and evening")


def sports_duration(category: str) -> str:
    return SPORTS_DURATIONS.get(category, "1-2 hours")


def describe_sports(tags, category: str, region: RegionConfig) -> str:
    template = DESCRIPTIONS.get(category, "Visit {name} for {sport} activities in {city}.")
    return template.format(
        name=tags.get("name") or "sports facility",
        sport=tags.get("sport") or "various sports",
        city=region.city,
    )


def sports_amenities(tags) -> List[str]:
    return yes_labels(tags, SPORTS_AMENITIES)


def normalize_sports(elements: Iterable[Element], context: Optional[NormalizeContext] = None) -> List[Record]:
    context = context or NormalizeContext()

    def build(element: Element, name: str) -> Record:
        tags = element["tags"]
        category = categorize_sports(tags)
        record = base_record(
            element,
            name,
            tags.get("description") or describe_sports(tags, category, context.region),
            context.region,
        )
        record.update({
            "category": category,
            "sport": sport_type(tags),
            "capacity": estimate_capacity(tags),
            "facilities": sports_facilities(tags),
            "entryFee": sports_entry_fee(category, context.region.currency),
            "timings": context.hours_parser.parse(tags.get("opening_hours")),
            "bestTimeToVisit": best_time_for_sports(category),
            "duration": sports_duration(category),
            "amenities": sports_amenities(tags),
            "rating": context.sampler.rating(10, 200),
        })
        return finish_record(record, element, context, featured_threshold=0.7, promoted_threshold=0.8)

    return normalize_elements(elements, build, FALLBACK_NAME)
