from __future__ import annotations
"""Paginated object listing against a single S3 backend."""
import logging
from typing import Callable, Iterator

import boto3
from botocore.client import Config
from botocore.exceptions import BotoCoreError, ClientError

from .errors import TransportError
from .models import ObjectPage, ObjectRecord
from .profiles import BackendProfile

LOGGER = logging.getLogger(__name__)

MAX_KEYS = 5_000_000
REQUEST_TIMEOUT = 900
MAX_OBJECT_SIZE = 2**64 - 1


class ListingService:
    """Walks a bucket listing to completion, one page request at a time."""

    def __init__(
        self,
        client_factory: Callable[..., object] | None = None,
        *,
        max_keys: int = MAX_KEYS,
        request_timeout: float = REQUEST_TIMEOUT,
    ):
        self._client_factory = client_factory or boto3.client
        self._max_keys = max_keys
        self._request_timeout = request_timeout

    def list_objects(self, profile: BackendProfile, bucket_name: str) -> list[ObjectRecord]:
        """Return every object in the bucket, unfiltered.

        Raises:
            TransportError: when any page request fails or is malformed.
        """
        records: list[ObjectRecord] = []
        for page in self.iter_pages(profile, bucket_name):
            records.extend(page.records)
        return records

    def iter_pages(self, profile: BackendProfile, bucket_name: str) -> Iterator[ObjectPage]:
        """Yield listing pages until the backend stops returning a continuation token."""

        client = self._create_client(profile)
        request_token: str | None = None
        page_number = 1

        while True:
            list_params = {"Bucket": bucket_name, "MaxKeys": self._max_keys}
            if request_token:
                list_params["ContinuationToken"] = request_token
            try:
                response = client.list_objects_v2(**list_params)
            except (ClientError, BotoCoreError) as exc:
                raise TransportError(
                    f"Listing {bucket_name} on backend {profile.name} failed: {exc}",
                    bucket=bucket_name,
                    backend=profile.name,
                ) from exc

            records = [
                self._build_record(obj, bucket_name, profile.name)
                for obj in response.get("Contents", [])
            ]
            response_token = response.get("NextContinuationToken")
            if response.get("IsTruncated", False) and not response_token:
                raise TransportError(
                    f"Listing {bucket_name} on backend {profile.name} is truncated "
                    "but carries no continuation token",
                    bucket=bucket_name,
                    backend=profile.name,
                )
            LOGGER.debug(
                "Backend %s bucket %s page %d: %d objects",
                profile.name,
                bucket_name,
                page_number,
                len(records),
            )
            yield ObjectPage(number=page_number, records=records, continuation_token=response_token)

            if not response_token:
                break
            request_token = response_token
            page_number += 1

    def _create_client(self, profile: BackendProfile):
        config = Config(
            signature_version="s3v4",
            s3={"addressing_style": "path"},
            read_timeout=self._request_timeout,
            retries={"total_max_attempts": 1},
        )
        return self._client_factory(
            "s3",
            endpoint_url=profile.endpoint_url,
            aws_access_key_id=profile.access_key,
            aws_secret_access_key=profile.secret_key,
            config=config,
        )

    @staticmethod
    def _build_record(obj: dict, bucket_name: str, backend: str) -> ObjectRecord:
        try:
            key = obj["Key"]
            size = int(obj["Size"])
        except (KeyError, TypeError, ValueError) as exc:
            raise TransportError(
                f"Malformed object entry in {bucket_name} on backend {backend}: {obj!r}",
                bucket=bucket_name,
                backend=backend,
            ) from exc
        if not 0 <= size <= MAX_OBJECT_SIZE:
            raise TransportError(
                f"Object {key} in {bucket_name} on backend {backend} has invalid size {size}",
                bucket=bucket_name,
                backend=backend,
            )
        return ObjectRecord(key=key, size=size, last_modified=obj.get("LastModified"))
