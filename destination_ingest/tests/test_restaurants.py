import pytest

from destination_ingest.src.normalizers import normalize_restaurants
from destination_ingest.src.normalizers.restaurants import extract_cuisine, price_band, restaurant_amenities

from .fakes import node


@pytest.mark.parametrize("raw, expected", [
    (None, ["Bengali"]),
    ("bengali", ["Bengali"]),
    ("north_indian;chinese", ["Bengali", "Chinese"]),
    ("Continental ; fast_food", ["Continental", "Fast Food"]),
    ("thai;;", ["Thai"]),
    ("pizza", ["Pizza"]),
])
def test_cuisine_mapping(raw, expected):
    tags = {"cuisine": raw} if raw is not None else {}
    assert extract_cuisine(tags) == expected


@pytest.mark.parametrize("tags, expected", [
    ({"amenity": "fast_food", "payment:credit_cards": "yes"}, "Budget"),
    ({"amenity": "cafe"}, "Budget"),
    ({"amenity": "restaurant", "payment:credit_cards": "yes", "cuisine": "fine_dining"}, "Mid-range"),
    ({"amenity": "restaurant", "cuisine": "french;fine_dining"}, "Fine Dining"),
    ({"amenity": "restaurant"}, "Mid-range"),
])
def test_price_band(tags, expected):
    assert price_band(tags) == expected


def test_restaurant_record(context):
    element = node(
        55, 22.55, 88.35,
        amenity="restaurant", name="Peter Cat", cuisine="continental;indian",
        outdoor_seating="yes", delivery="yes", opening_hours="Mo-Su 11:00-23:00",
    )
    [record] = normalize_restaurants([element], context)

    assert record["cuisine"] == ["Continental", "Bengali"]
    assert record["priceRange"] == "Mid-range"
    assert record["avgMealCost"] == 500
    assert record["amenities"] == ["Outdoor Seating", "Home Delivery"]
    assert record["location"]["coordinates"] == [88.35, 22.55]
    assert record["openingHours"]["sunday"] == {"open": "09:00", "close": "21:00", "closed": False}
    assert len(record["openingHours"]) == 7
    assert record["menu"][0]["items"][0]["name"] == "Chicken Biryani"
    assert record["deliveryPartners"] in ([], ["Swiggy", "Zomato"])
    assert isinstance(record["reservationRequired"], bool)
    assert record["description"] == "A restaurant serving delicious food"


def test_bengali_menu_and_cafe_cost(context):
    [record] = normalize_restaurants([node(3, 22.5, 88.3, amenity="cafe", name="Coffee House")], context)
    assert record["menu"][0]["items"][0]["name"] == "Fish Curry Rice"
    assert record["avgMealCost"] == 250
    assert record["priceRange"] == "Budget"


def test_unnamed_restaurant_dropped(context):
    elements = [node(1, 22.5, 88.3, amenity="restaurant"), node(2, 22.5, 88.3, amenity="cafe", name="Flurys")]
    assert [r["name"] for r in normalize_restaurants(elements, context)] == ["Flurys"]


def test_wifi_from_either_key():
    assert restaurant_amenities({"internet_access": "yes"}) == ["WiFi"]
    assert restaurant_amenities({"wifi": "yes", "amenity:air_conditioning": "yes"}) == ["WiFi", "AC"]
