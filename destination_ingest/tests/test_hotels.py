import pytest

from destination_ingest.src.normalizers import NormalizeContext, PlaceholderSampler, normalize_hotels
from destination_ingest.src.normalizers.common import PRICE_TABLE, estimate_price
from destination_ingest.src.normalizers.hotels import (
    DEFAULT_HOTEL_CATEGORY,
    HOTEL_CATEGORIES,
    HOTEL_RULES,
    categorize_hotel,
    hotel_amenities,
)

from .fakes import node


def test_grand_hotel_is_luxury(context):
    element = node(101, 22.57, 88.36, tourism="hotel", name="Grand Hotel", stars="5")

    [record] = normalize_hotels([element], context)

    assert record["name"] == "Grand Hotel"
    assert record["category"] == "Luxury"
    assert record["location"] == {"type": "Point", "coordinates": [88.36, 22.57]}
    assert record["priceRange"] == {"min": 1500, "max": 8000, "currency": "INR"}
    assert record["roomTypes"][0]["price"] == 1500
    assert record["checkInTime"] == "14:00"
    assert record["source"] == "OpenStreetMap"
    assert record["osmId"] == 101
    assert record["status"] == "active"
    assert record["slug"] == "grand-hotel-101"


def test_unnamed_hotel_is_dropped(context):
    assert normalize_hotels([node(1, 22.5, 88.3, tourism="hotel")], context) == []


def test_ineligible_elements_are_dropped(context):
    elements = [
        {"type": "way", "id": 2, "tags": {"tourism": "hotel", "name": "No Coordinates"}},
        {"type": "node", "id": 3, "lat": 22.5, "lon": 88.3},
        {"type": "node", "id": 4, "lat": 22.5, "lon": 88.3, "tags": {}},
        node(5, 0.0, 0.0, tourism="hotel", name="Null Island Inn"),
    ]
    records = normalize_hotels(elements, context)
    assert [r["name"] for r in records] == ["Null Island Inn"]


@pytest.mark.parametrize("tags, expected", [
    ({"stars": "4"}, "Luxury"),
    ({"stars": "3"}, "Business"),
    ({"stars": "2"}, "Budget"),
    ({"stars": "unrated", "name": "Heritage Palace"}, "Budget"),
    ({"tourism": "hostel", "name": "Palace Hostel"}, "Budget"),
    ({"tourism": "guest_house"}, "Budget"),
    ({"tourism": "hotel", "name": "The Heritage Inn"}, "Heritage"),
    ({"tourism": "hotel", "name": "Marble Palace Hotel"}, "Heritage"),
    ({"tourism": "hotel", "name": "Sunderbans Resort"}, "Resort"),
    ({"tourism": "hotel", "name": "Boutique Stay"}, "Boutique"),
    ({"tourism": "hotel", "name": "Plain Hotel"}, "Business"),
])
def test_hotel_categories(tags, expected):
    assert categorize_hotel(tags) == expected
    assert categorize_hotel(tags) == expected


def test_hotel_amenities_from_yes_tags():
    tags = {"wifi": "yes", "internet_access": "no", "swimming_pool": "yes", "bar": "no"}
    assert hotel_amenities(tags) == ["WiFi", "Pool"]


def test_price_table_falls_back_to_restaurant():
    for kind in PRICE_TABLE:
        assert set(PRICE_TABLE[kind]) == {"min", "max", "avg"}
    assert estimate_price("motel", "min") == PRICE_TABLE["restaurant"]["min"]
    assert estimate_price(None, "avg") == 500


def test_guest_house_pricing(context):
    [record] = normalize_hotels([node(7, 22.5, 88.3, tourism="guest_house", name="Sonar Bangla")], context)
    assert record["priceRange"]["min"] == 800
    assert record["description"] == "A guest_house in Kolkata"


def test_same_seed_same_output():
    elements = [node(i, 22.5, 88.3, tourism="hotel", name=f"Hotel {i}") for i in range(5)]
    first = normalize_hotels(elements, NormalizeContext(sampler=PlaceholderSampler.seeded(7)))
    second = normalize_hotels(elements, NormalizeContext(sampler=PlaceholderSampler.seeded(7)))
    assert first == second
    for record in first:
        assert 3.0 <= record["rating"]["average"] <= 5.0
        assert 10 <= record["rating"]["count"] < 110


def test_contact_and_address(context):
    element = node(
        9, 22.5, 88.3,
        tourism="hotel", name="Oberoi Grand",
        **{
            "phone": "+91 33 2249 2323",
            "contact:phone": "+91 33 2249 2323",
            "operator:phone": "+91 33 0000 0000",
            "contact:email": "stay@oberoi.test",
            "url": "https://oberoi.test",
            "addr:street": "Jawaharlal Nehru Road",
            "addr:district": "Esplanade",
            "addr:postcode": "700013",
        }
    )
    [record] = normalize_hotels([element], context)
    assert record["contact"] == {
        "phone": ["+91 33 2249 2323", "+91 33 0000 0000"],
        "email": "stay@oberoi.test",
        "website": "https://oberoi.test",
        "socialMedia": {},
    }
    assert record["address"] == {
        "street": "Jawaharlal Nehru Road",
        "area": "Esplanade",
        "city": "Kolkata",
        "state": "West Bengal",
        "pincode": "700013",
        "landmark": "",
    }
    assert record["tags"] == ["Esplanade", "hotel"]


def test_rule_labels_cover_declared_categories():
    assert {rule.label for rule in HOTEL_RULES} | {DEFAULT_HOTEL_CATEGORY} == set(HOTEL_CATEGORIES)


def test_missing_tourism_uses_restaurant_pricing(context):
    [record] = normalize_hotels([node(12, 22.5, 88.3, name="Mystery Lodge")], context)
    assert record["priceRange"]["min"] == PRICE_TABLE["restaurant"]["min"]
    assert record["priceRange"]["max"] == PRICE_TABLE["restaurant"]["max"]
    assert record["description"] == "A hotel in Kolkata"


def test_pending_records_are_never_highlighted():
    elements = [node(i, 22.5, 88.3, tourism="hotel", name=f"Hotel {i}") for i in range(50)]
    pending = NormalizeContext(sampler=PlaceholderSampler.seeded(11), status="pending")
    active = NormalizeContext(sampler=PlaceholderSampler.seeded(11))

    pending_records = normalize_hotels(elements, pending)
    active_records = normalize_hotels(elements, active)

    assert all(r["status"] == "pending" for r in pending_records)
    assert not any(r["featured"] or r["promoted"] for r in pending_records)
    assert any(r["featured"] or r["promoted"] for r in active_records)
    assert [r["rating"] for r in pending_records] == [r["rating"] for r in active_records]
