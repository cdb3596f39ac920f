from __future__ import annotations
"""Last-modified cutoff filtering for listed objects."""
from datetime import datetime
from typing import Iterable, Iterator

from dateutil.parser import isoparse

from .errors import ConfigurationError, MalformedTimestamp
from .models import ObjectRecord


def parse_timestamp(value: object) -> datetime:
    """Parse an RFC 3339 timestamp into an offset-aware ``datetime``.

    ``datetime`` values are returned unchanged as long as they carry an offset.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = isoparse(value.strip())
        except (ValueError, OverflowError):
            raise MalformedTimestamp(f"Cannot parse timestamp {value!r}") from None
    else:
        raise MalformedTimestamp(f"Cannot parse timestamp {value!r}")

    if parsed.tzinfo is None or parsed.utcoffset() is None:
        raise MalformedTimestamp(f"Timestamp {value!r} has no UTC offset")
    return parsed


def is_before_cutoff(last_modified: object, cutoff: datetime) -> bool:
    return parse_timestamp(last_modified) <= cutoff


def filter_by_cutoff(records: Iterable[ObjectRecord], cutoff: datetime) -> Iterator[ObjectRecord]:
    """Yield the records last modified at or before ``cutoff``.

    Raises:
        MalformedTimestamp: as soon as a record's timestamp cannot be parsed.
    """
    cutoff = parse_timestamp(cutoff)
    for record in records:
        if is_before_cutoff(record.last_modified, cutoff):
            yield record


def read_cutoff(path) -> datetime:
    """Read the cutoff timestamp stored in ``path``."""
    try:
        with open(path, encoding="utf-8") as handle:
            text = handle.read()
    except OSError as exc:
        raise ConfigurationError(f"Cannot read cutoff file {path}: {exc}") from exc
    return parse_timestamp(text)
