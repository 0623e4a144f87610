"""
Synthetic events and promotions.

OpenStreetMap has no event or promotion data, so these two categories come
from a small bundled sample catalogue (``data/sample_listings.json``). Output
is deterministic: no network calls and no sampling.
"""

import copy
import json
import logging
from datetime import date, datetime, timezone
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

from destination_ingest.src.normalizers.common import NormalizeContext, Record, make_slug

logger = logging.getLogger(__name__)

CATALOGUE_FILE = Path(__file__).resolve().parent / "data" / "sample_listings.json"

EVENT_DATE_FIELDS = ("startDate", "endDate")
PROMOTION_DATE_FIELDS = ("validFrom", "validUntil")


@lru_cache(maxsize=1)
def load_catalogue(path: Path = CATALOGUE_FILE) -> Dict[str, Any]:
    """Read the sample catalogue once per process.

    Raises:
        FileNotFoundError: If the catalogue is missing from the install
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    logger.debug(
        "Loaded sample catalogue v%s: %d events, %d promotions",
        data.get("version"), len(data.get("events", [])), len(data.get("promotions", [])),
    )
    return data


def iso_utc(day: str) -> str:
    """``"2024-10-10"`` -> ``"2024-10-10T00:00:00Z"`` (midnight UTC)."""
    parsed = date.fromisoformat(day)
    moment = datetime(parsed.year, parsed.month, parsed.day, tzinfo=timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%SZ")


def _with_dates(entry: Dict[str, Any], fields) -> Dict[str, Any]:
    for name in fields:
        if entry.get(name):
            entry[name] = iso_utc(entry[name])
    return entry


def generate_events(context: Optional[NormalizeContext] = None) -> List[Record]:
    context = context or NormalizeContext()
    events = []
    for sample in load_catalogue()["events"]:
        event = _with_dates(copy.deepcopy(sample), EVENT_DATE_FIELDS)
        event["address"] = {
            "city": context.region.city,
            "state": context.region.state,
            **event.get("address", {}),
        }
        event["ticketPrice"].setdefault("currency", context.region.currency)
        event.setdefault("isRecurring", False)
        event.setdefault("featured", False)
        event.setdefault("promoted", False)
        event["status"] = context.status
        event["slug"] = make_slug(event["name"])
        events.append(event)
    return events


def generate_promotions(context: Optional[NormalizeContext] = None) -> List[Record]:
    """Sample discount codes; ``context`` is accepted for symmetry with the other categories."""
    promotions = []
    for sample in load_catalogue()["promotions"]:
        promotion = _with_dates(copy.deepcopy(sample), PROMOTION_DATE_FIELDS)
        promotion.setdefault("terms", [])
        promotion["slug"] = make_slug(promotion["title"])
        promotions.append(promotion)
    return promotions
