"""Hotel listings from OSM ``tourism=hotel|guest_house|hostel`` elements."""

from typing import Iterable, List, Optional

from destination_ingest.src.rules import Rule, has_tag, int_tag, name_contains, resolve, tag_equals
from .common import (
    Element,
    NormalizeContext,
    Record,
    base_record,
    estimate_price,
    finish_record,
    normalize_elements,
    yes_labels,
)

FALLBACK_NAME = "Unnamed Hotel"

HOTEL_CATEGORIES = ("Luxury", "Business", "Budget", "Heritage", "Resort", "Boutique")

# Any stars value decides the category, even one that does not parse.
HOTEL_RULES = [
    Rule("Luxury", int_tag("stars", lambda stars: stars >= 4)),
    Rule("Business", int_tag("stars", lambda stars: stars == 3)),
    Rule("Budget", has_tag("stars")),
    Rule("Budget", tag_equals("tourism", "hostel")),
    Rule("Budget", tag_equals("tourism", "guest_house")),
    Rule("Heritage", name_contains("heritage", "palace")),
    Rule("Resort", name_contains("resort")),
    Rule("Boutique", name_contains("boutique")),
]
DEFAULT_HOTEL_CATEGORY = "Business"

HOTEL_AMENITIES = [
    (("internet_access", "wifi"), "WiFi"),
    ("amenity:air_conditioning", "AC"),
    ("parking", "Parking"),
    ("swimming_pool", "Pool"),
    ("fitness_centre", "Gym"),
    ("spa", "Spa"),
    ("restaurant", "Restaurant"),
    ("bar", "Bar"),
    ("room_service", "Room Service"),
]


def categorize_hotel(tags) -> str:
    return resolve(HOTEL_RULES, tags, DEFAULT_HOTEL_CATEGORY)


def hotel_amenities(tags) -> List[str]:
    return yes_labels(tags, HOTEL_AMENITIES)


def normalize_hotels(elements: Iterable[Element], context: Optional[NormalizeContext] = None) -> List[Record]:
    context = context or NormalizeContext()

    def build(element: Element, name: str) -> Record:
        tags = element["tags"]
        kind = tags.get("tourism")
        min_price = estimate_price(kind, "min")
        record = base_record(
            element,
            name,
            tags.get("description") or f"A {kind or 'hotel'} in {context.region.city}",
            context.region,
        )
        record.update({
            "priceRange": {
                "min": min_price,
                "max": estimate_price(kind, "max"),
                "currency": context.region.currency,
            },
            "category": categorize_hotel(tags),
            "amenities": hotel_amenities(tags),
            "rating": context.sampler.rating(10, 100),
            "roomTypes": [{
                "name": "Standard Room",
                "price": min_price,
                "capacity": 2,
                "amenities": ["WiFi", "AC"],
                "images": [],
                "available": True,
            }],
            "checkInTime": "14:00",
            "checkOutTime": "12:00",
        })
        return finish_record(record, element, context)

    return normalize_elements(elements, build, FALLBACK_NAME)
