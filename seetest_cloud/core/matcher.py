"""Conjunctive, case-insensitive attribute matching over device records.

A predicate maps attribute keys to expected values. A record matches when
every key is present and its value equals the expected value ignoring
case. The empty predicate matches every record.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from .models import AttributeKey, DeviceRecord

Predicate = Mapping[AttributeKey, str]


def normalize_predicate(query: Mapping[AttributeKey | str, str] | None) -> dict[AttributeKey, str]:
    """Validate predicate keys and return a ``dict`` keyed by ``AttributeKey``.

    Raises:
        ValueError: If a key is not a known attribute.

    """
    if not query:
        return {}
    return {AttributeKey.parse(key): str(value) for key, value in query.items()}


def values_equal(expected: str, actual: str) -> bool:
    """Compare two attribute values ignoring case, independent of locale."""
    return expected.casefold() == actual.casefold()


def matches(record: DeviceRecord, predicate: Predicate) -> bool:
    """Return ``True`` if *record* satisfies every pair of *predicate*."""
    for key, expected in predicate.items():
        actual = record.get(key)
        if actual is None or not values_equal(expected, actual):
            return False
    return True


def filter_records(records: Iterable[DeviceRecord], predicate: Predicate) -> list[DeviceRecord]:
    """Return the records matching *predicate*, in iteration order."""
    return [record for record in records if matches(record, predicate)]
