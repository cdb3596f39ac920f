from __future__ import annotations
"""Symmetric difference of (key, size) pairs between two backends."""
from typing import Iterable

from .models import MismatchEntry, ObjectRecord, ReconciliationMap


class Reconciler:
    """Builds a :data:`ReconciliationMap` incrementally.

    Backend A is seeded first, then backend B is applied against it. Both
    steps take any iterable of records, so page boundaries do not matter.
    Duplicate keys within one backend are not expected; the later record
    wins.
    """

    def __init__(self) -> None:
        self._entries: ReconciliationMap = {}

    def seed(self, records: Iterable[ObjectRecord]) -> None:
        for record in records:
            self._entries[record.key] = MismatchEntry(size_a=record.size)

    def apply(self, records: Iterable[ObjectRecord]) -> None:
        entries = self._entries
        for record in records:
            entry = entries.get(record.key)
            if entry is None or entry.size_a is None:
                entries[record.key] = MismatchEntry(size_b=record.size)
            elif entry.size_a == record.size:
                del entries[record.key]
            else:
                entry.size_b = record.size

    def result(self) -> ReconciliationMap:
        return dict(self._entries)


def reconcile(
    records_a: Iterable[ObjectRecord],
    records_b: Iterable[ObjectRecord],
) -> ReconciliationMap:
    reconciler = Reconciler()
    reconciler.seed(records_a)
    reconciler.apply(records_b)
    return reconciler.result()
