from __future__ import annotations
"""Flat-file persistence of reconciliation results."""
import json
import logging
from pathlib import Path
from typing import Iterable

from .errors import PersistenceError
from .models import STATUS_CLEAN, STATUS_MISMATCH, ReconciliationMap

LOGGER = logging.getLogger(__name__)

DETAILS_PREFIX = "rados_copy_details_"
DETAILS_FILE = "rados_copy_details"
STATUS_FILE = "rados_copy_status"


class ReportWriter:
    """Writes per-bucket reports, the mismatch list and the run status."""

    def __init__(self, output_dir: str | Path):
        self._output_dir = Path(output_dir)

    def bucket_report_path(self, bucket_name: str) -> Path:
        return self._output_dir / f"{DETAILS_PREFIX}{bucket_name}"

    def write_bucket_report(self, bucket_name: str, mismatches: ReconciliationMap) -> Path:
        """Serialize ``mismatches`` as a JSON object, replacing any earlier report."""

        path = self.bucket_report_path(bucket_name)
        payload = {key: entry.to_dict() for key, entry in mismatches.items()}
        self._write(path, json.dumps(payload, indent=2, sort_keys=True), append=False)
        LOGGER.info("Wrote %d mismatches for %s to %s", len(mismatches), bucket_name, path)
        return path

    def append_mismatching_buckets(self, bucket_names: Iterable[str]) -> Path:
        path = self._output_dir / DETAILS_FILE
        data = "".join(f"{name}\n" for name in bucket_names)
        self._write(path, data, append=True)
        return path

    def write_status(self, status: str) -> Path:
        """Persist the run status without ever downgrading a stored ``1``."""

        path = self._output_dir / STATUS_FILE
        if status == STATUS_CLEAN:
            if not path.exists():
                self._write(path, status, append=False)
        elif status == STATUS_MISMATCH:
            self._write(path, status, append=False)
        else:
            raise ValueError(f"Invalid run status {status!r}")
        return path

    @staticmethod
    def _write(path: Path, data: str, *, append: bool) -> None:
        try:
            with path.open("a" if append else "w", encoding="utf-8") as handle:
                handle.write(data)
        except OSError as exc:
            raise PersistenceError(f"Cannot write {path}: {exc}") from exc
