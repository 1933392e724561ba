"""Map curations onto DynamoDB items for the curations table."""

from __future__ import annotations

import uuid
from collections.abc import Callable, Sequence
from typing import Any

from models import CurationRecord, ResolvedEnrichment

CURATION_TYPE = "standard"

DynamoItem = dict[str, dict[str, Any]]


def build_record(
    curation: CurationRecord,
    enrichment: ResolvedEnrichment,
    id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
) -> DynamoItem:
    """Build a put-item for one curation.

    Empty source lists are left out of the item entirely; DynamoDB treats a
    missing attribute and an empty list differently in filters.
    """
    item: DynamoItem = {
        "id": _string(id_factory()),
        "external_curation_id": _string(curation.external_id),
        "curation_type": _string(CURATION_TYPE),
        "language": _string(enrichment.language),
    }

    if curation.queries:
        item["queries"] = _string_list(curation.queries)
    if curation.promoted:
        item["promoted"] = _string_list(curation.promoted)
        item["document_id"] = _string(curation.promoted[0])
    if curation.hidden:
        item["hidden"] = _string_list(curation.hidden)

    document = enrichment.document
    if document is not None and document.title:
        item["title"] = _string(document.title)

    return item


def _string(value: str) -> dict[str, str]:
    return {"S": value}


def _string_list(values: Sequence[str]) -> dict[str, list[dict[str, str]]]:
    return {"L": [_string(value) for value in values]}
