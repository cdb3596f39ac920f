from __future__ import annotations
"""Data models representing listings and reconciliation results."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Union

ONLY_A = "only_a"
ONLY_B = "only_b"
SIZE_MISMATCH = "size_mismatch"

STATUS_CLEAN = "0"
STATUS_MISMATCH = "1"


@dataclass(frozen=True)
class ObjectRecord:
    """A single listed object."""

    key: str
    size: int
    last_modified: Union[datetime, str, None] = None


@dataclass
class ObjectPage:
    """Represents a single page of a bucket listing."""

    number: int
    records: list[ObjectRecord] = field(default_factory=list)
    continuation_token: Optional[str] = None


@dataclass
class MismatchEntry:
    """Sizes seen for one key that does not agree between the backends."""

    size_a: Optional[int] = None
    size_b: Optional[int] = None

    @property
    def kind(self) -> str:
        if self.size_b is None:
            return ONLY_A
        if self.size_a is None:
            return ONLY_B
        return SIZE_MISMATCH

    def to_dict(self) -> dict[str, object]:
        return {"status": self.kind, "size_a": self.size_a, "size_b": self.size_b}


ReconciliationMap = dict[str, MismatchEntry]


@dataclass
class BucketResult:
    """Outcome of reconciling one bucket."""

    bucket: str
    mismatches: ReconciliationMap = field(default_factory=dict)
    listed: dict[str, int] = field(default_factory=dict)
    retained: dict[str, int] = field(default_factory=dict)

    @property
    def has_mismatches(self) -> bool:
        return bool(self.mismatches)


@dataclass
class RunStatus:
    """Accumulates per-bucket outcomes over a single run."""

    status: str = STATUS_CLEAN
    mismatching_buckets: list[str] = field(default_factory=list)
    results: list[BucketResult] = field(default_factory=list)

    def record(self, result: BucketResult) -> None:
        self.results.append(result)
        if result.has_mismatches:
            self.mismatching_buckets.append(result.bucket)
            self.status = STATUS_MISMATCH

    @property
    def clean(self) -> bool:
        return self.status == STATUS_CLEAN
