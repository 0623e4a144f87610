"""
Ordered rule tables for tag-based categorization.

A rule table is a list of ``Rule(label, predicate)``; ``resolve`` returns the
label of the first rule whose predicate accepts the tag map. Order is part of
the table's meaning.
"""

import re
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping, Optional

Tags = Mapping[str, str]
Predicate = Callable[[Tags], bool]


@dataclass(frozen=True)
class Rule:
    label: Any
    predicate: Predicate


def resolve(rules: Iterable[Rule], tags: Tags, default: Any) -> Any:
    for rule in rules:
        if rule.predicate(tags):
            return rule.label
    return default


def leading_int(value: Optional[str]) -> Optional[int]:
    """Integer prefix of a tag value (``"4"``, ``"4.5"``, ``"3S"``), else None."""
    if value is None:
        return None
    match = re.match(r"\s*([+-]?\d+)", value)
    return int(match.group(1)) if match else None


def tag_equals(key: str, *values: str) -> Predicate:
    return lambda tags: tags.get(key) in values


def has_tag(key: str) -> Predicate:
    """Tag present with a non-empty value."""
    return lambda tags: bool(tags.get(key))


def name_contains(*needles: str) -> Predicate:
    def _check(tags: Tags) -> bool:
        name = (tags.get("name") or "").lower()
        return any(n in name for n in needles)
    return _check


def value_contains(key: str, needle: str) -> Predicate:
    return lambda tags: needle in (tags.get(key) or "")


def int_tag(key: str, test: Callable[[int], bool]) -> Predicate:
    """Tag parses to an integer that satisfies ``test``."""
    def _check(tags: Tags) -> bool:
        number = leading_int(tags.get(key))
        return number is not None and test(number)
    return _check
