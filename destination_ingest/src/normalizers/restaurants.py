"""Restaurant listings from OSM ``amenity=restaurant|cafe|fast_food|food_court`` elements."""

from typing import Dict, Iterable, List, Optional

from destination_ingest.src.rules import Rule, resolve, tag_equals, value_contains
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

FALLBACK_NAME = "Unnamed Restaurant"

DEFAULT_CUISINE = "indian"
DELIVERY_PARTNERS = ["Swiggy", "Zomato"]

# Matched against each lower-cased ``cuisine`` entry; first hit wins.
CUISINE_RULES = [
    (("indian", "bengali"), "Bengali"),
    (("chinese",), "Chinese"),
    (("continental",), "Continental"),
    (("fast_food",), "Fast Food"),
]

PRICE_BAND_RULES = [
    Rule("Budget", tag_equals("amenity", "fast_food")),
    Rule("Budget", tag_equals("amenity", "cafe")),
    Rule("Mid-range", tag_equals("payment:credit_cards", "yes")),
    Rule("Fine Dining", value_contains("cuisine", "fine_dining")),
]
DEFAULT_PRICE_BAND = "Mid-range"

RESTAURANT_AMENITIES = [
    ("outdoor_seating", "Outdoor Seating"),
    (("internet_access", "wifi"), "WiFi"),
    ("parking", "Parking"),
    ("live_music", "Live Music"),
    ("amenity:air_conditioning", "AC"),
    ("delivery", "Home Delivery"),
    ("takeaway", "Takeaway"),
]


def map_cuisine(value: str) -> str:
    for needles, label in CUISINE_RULES:
        if any(needle in value for needle in needles):
            return label
    return value[:1].upper() + value[1:]


def extract_cuisine(tags) -> List[str]:
    raw = tags.get("cuisine") or DEFAULT_CUISINE
    entries = (part.strip().lower() for part in raw.split(";"))
    return [map_cuisine(entry) for entry in entries if entry]


def price_band(tags) -> str:
    return resolve(PRICE_BAND_RULES, tags, DEFAULT_PRICE_BAND)


def restaurant_amenities(tags) -> List[str]:
    return yes_labels(tags, RESTAURANT_AMENITIES)


def sample_menu(cuisine: List[str]) -> List[Dict]:
    lead = cuisine[0] if cuisine else "Bengali"
    return [{
        "category": "Main Course",
        "items": [
            {
                "name": "Fish Curry Rice" if lead == "Bengali" else "Chicken Biryani",
                "price": 180,
                "description": f"Traditional {lead.lower()} dish with steamed rice",
                "isVeg": False,
                "isVegan": False,
                "spiceLevel": 2,
            },
            {
                "name": "Vegetable Thali",
                "price": 150,
                "description": "Complete vegetarian meal with dal, sabzi, rice, and roti",
                "isVeg": True,
                "isVegan": False,
                "spiceLevel": 1,
            },
        ],
    }]


def normalize_restaurants(elements: Iterable[Element], context: Optional[NormalizeContext] = None) -> List[Record]:
    context = context or NormalizeContext()
    sampler = context.sampler

    def build(element: Element, name: str) -> Record:
        tags = element["tags"]
        kind = tags.get("amenity") or "restaurant"
        cuisine = extract_cuisine(tags)
        record = base_record(
            element,
            name,
            tags.get("description") or f"A {kind} serving delicious food",
            context.region,
        )
        record.update({
            "cuisine": cuisine,
            "priceRange": price_band(tags),
            "openingHours": context.hours_parser.parse(tags.get("opening_hours")),
            "menu": sample_menu(cuisine),
            "amenities": restaurant_amenities(tags),
            "rating": sampler.rating(5, 200),
            "deliveryPartners": list(DELIVERY_PARTNERS) if sampler.chance(0.5) else [],
            "reservationRequired": sampler.chance(0.7),
            "avgMealCost": estimate_price(kind, "avg"),
        })
        return finish_record(record, element, context)

    return normalize_elements(elements, build, FALLBACK_NAME)
