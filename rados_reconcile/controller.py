from __future__ import annotations
"""Bucket-level driver that reconciles each bucket of a run."""

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
import logging
from typing import Iterable

from .filters import filter_by_cutoff
from .formatting import format_size, summarize_mismatches
from .models import BucketResult, ObjectRecord, RunStatus
from .profiles import BackendProfile
from .reconcile import Reconciler
from .reports import ReportWriter
from .services import ListingService

LOGGER = logging.getLogger(__name__)


class ReconciliationController:
    """Coordinates listing, filtering, reconciliation and reporting."""

    def __init__(
        self,
        backend_a: BackendProfile,
        backend_b: BackendProfile,
        *,
        service: ListingService | None = None,
        writer: ReportWriter | None = None,
        parallel: bool = False,
    ):
        self._backend_a = backend_a
        self._backend_b = backend_b
        self._service = service or ListingService()
        self._writer = writer
        self._parallel = parallel

    def run(self, bucket_names: Iterable[str], cutoff: datetime) -> RunStatus:
        """Reconcile every named bucket and persist the run outcome.

        Blank entries are skipped. Any error aborts the run; reports already
        written for earlier buckets are left in place.
        """
        run_status = RunStatus()
        for raw_name in bucket_names:
            bucket_name = raw_name.strip()
            if not bucket_name:
                continue
            result = self.reconcile_bucket(bucket_name, cutoff)
            if result.has_mismatches and self._writer is not None:
                self._writer.write_bucket_report(bucket_name, result.mismatches)
            run_status.record(result)

        if self._writer is not None:
            self._writer.write_status(run_status.status)
            self._writer.append_mismatching_buckets(run_status.mismatching_buckets)
        LOGGER.info(
            "Reconciled %d buckets, %d with mismatches, status %s",
            len(run_status.results),
            len(run_status.mismatching_buckets),
            run_status.status,
        )
        return run_status

    def reconcile_bucket(self, bucket_name: str, cutoff: datetime) -> BucketResult:
        result = BucketResult(bucket=bucket_name)
        if self._parallel:
            with ThreadPoolExecutor(max_workers=2, thread_name_prefix="listing") as executor:
                future_a = executor.submit(self._collect, self._backend_a, bucket_name, cutoff, result)
                future_b = executor.submit(self._collect, self._backend_b, bucket_name, cutoff, result)
                records_a = future_a.result()
                records_b = future_b.result()
        else:
            records_a = self._collect(self._backend_a, bucket_name, cutoff, result)
            records_b = self._collect(self._backend_b, bucket_name, cutoff, result)

        reconciler = Reconciler()
        reconciler.seed(records_a)
        reconciler.apply(records_b)
        result.mismatches = reconciler.result()
        LOGGER.info(
            "Bucket %s: %d objects different %s",
            bucket_name,
            len(result.mismatches),
            summarize_mismatches(result.mismatches),
        )
        return result

    def _collect(
        self,
        profile: BackendProfile,
        bucket_name: str,
        cutoff: datetime,
        result: BucketResult,
    ) -> list[ObjectRecord]:
        LOGGER.info("Listing objects from %s on backend %s", bucket_name, profile.name)
        listed = self._service.list_objects(profile, bucket_name)
        retained = list(filter_by_cutoff(listed, cutoff))
        result.listed[profile.name] = len(listed)
        result.retained[profile.name] = len(retained)
        LOGGER.info(
            "Backend %s bucket %s: %d objects listed, %d retained (%s)",
            profile.name,
            bucket_name,
            len(listed),
            len(retained),
            format_size(sum(record.size for record in retained)),
        )
        return retained
