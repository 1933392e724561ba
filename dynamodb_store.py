"""DynamoDB persistence for synced curations."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from models import WriteSummary

DEFAULT_TABLE_NAME = "curations"
# Protocol limit for one BatchWriteItem call in this job; not a tunable.
BATCH_WRITE_CHUNK_SIZE = 20

LOGGER = logging.getLogger(__name__)


class DedupCheckError(RuntimeError):
    """Raised when the store cannot tell whether a curation already exists."""


def create_dynamodb_client(region: str) -> Any:
    return boto3.client("dynamodb", region_name=region)


def chunked(items: Sequence[Any], size: int) -> Iterator[Sequence[Any]]:
    for start in range(0, len(items), size):
        yield items[start : start + size]


class DynamoCurationStore:
    """Dedup lookups and batched writes against the curations table."""

    def __init__(self, client: Any, table_name: str = DEFAULT_TABLE_NAME) -> None:
        self._client = client
        self.table_name = table_name

    def curation_exists(self, external_id: str) -> bool:
        """Return True as soon as any item with this external curation id is seen.

        Point-in-time scan, no locking. Scan filters are applied after the page
        limit, so empty pages are followed until the table is exhausted.
        """
        scan_kwargs: dict[str, Any] = {
            "TableName": self.table_name,
            "FilterExpression": "external_curation_id = :eci",
            "ExpressionAttributeValues": {":eci": {"S": external_id}},
            "ProjectionExpression": "id",
        }
        try:
            while True:
                response = self._client.scan(**scan_kwargs)
                if response.get("Count", 0) > 0:
                    return True
                last_key = response.get("LastEvaluatedKey")
                if not last_key:
                    return False
                scan_kwargs["ExclusiveStartKey"] = last_key
        except (BotoCoreError, ClientError) as exc:
            raise DedupCheckError(f"Dedup check failed for curation {external_id}: {exc}") from exc

    def write_items(self, items: Sequence[dict[str, Any]]) -> WriteSummary:
        """Write items in sequential chunks, one attempt per chunk.

        Unprocessed items and items of a rejected chunk are counted as failed
        and are not retried.
        """
        failed = 0
        chunks = 0
        total_chunks = -(-len(items) // BATCH_WRITE_CHUNK_SIZE)

        for position, chunk in enumerate(chunked(items, BATCH_WRITE_CHUNK_SIZE), start=1):
            chunks += 1
            LOGGER.info("Persisting chunk %s/%s (%s items)...", position, total_chunks, len(chunk))
            requests = [{"PutRequest": {"Item": item}} for item in chunk]
            try:
                response = self._client.batch_write_item(RequestItems={self.table_name: requests})
            except (BotoCoreError, ClientError) as exc:
                failed += len(chunk)
                LOGGER.exception("Chunk %s rejected, %s items failed: %s", position, len(chunk), exc)
                continue

            unprocessed = len(response.get("UnprocessedItems", {}).get(self.table_name, []))
            if unprocessed:
                LOGGER.warning("Chunk %s left %s items unprocessed", position, unprocessed)
            failed += unprocessed

        return WriteSummary(succeeded=len(items) - failed, failed=failed, chunks=chunks)
