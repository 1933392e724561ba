"""Elastic App Search client for curations and their promoted documents."""

from __future__ import annotations

import logging
from typing import Any

import requests

from models import CurationRecord, EnrichmentDocument, PageEnvelope

API_PATH = "/api/as/v1/engines"
REQUEST_TIMEOUT_SECONDS = 30

LOGGER = logging.getLogger(__name__)


class SourceFetchError(RuntimeError):
    """Raised when a page of curations cannot be retrieved or decoded."""


class AppSearchClient:
    """Read-only access to one App Search engine, authenticated by bearer token."""

    def __init__(
        self,
        base_url: str,
        engine: str,
        api_key: str,
        session: requests.Session | None = None,
    ) -> None:
        self.url = f"{base_url.rstrip('/')}{API_PATH}/{engine}"
        self._session = session or requests.Session()
        self._headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }

    def fetch_curations_page(self, page_number: int) -> PageEnvelope:
        """Fetch one page of curations; any failure is fatal to the caller."""
        try:
            response = self._session.get(
                f"{self.url}/curations",
                params={"page[current]": page_number},
                headers=self._headers,
                timeout=REQUEST_TIMEOUT_SECONDS,
            )
            response.raise_for_status()
            body = response.json()
        except (requests.RequestException, ValueError) as exc:
            raise SourceFetchError(f"Failed to fetch curations page {page_number}: {exc}") from exc

        return _parse_curations_payload(body)

    def fetch_document(self, document_id: str) -> EnrichmentDocument | None:
        """Fetch a single document by id.

        Never raises. Not found, an empty result and transport or decode
        errors all come back as None, with the reason logged.
        """
        try:
            response = self._session.get(
                f"{self.url}/documents",
                params={"ids[]": document_id},
                headers=self._headers,
                timeout=REQUEST_TIMEOUT_SECONDS,
            )
            if response.status_code == 404:
                LOGGER.info("Document %s not found", document_id)
                return None
            response.raise_for_status()
            body = response.json()
        except (requests.RequestException, ValueError) as exc:
            LOGGER.warning("Failed to fetch document %s: %s", document_id, exc)
            return None

        return _parse_document_payload(body, document_id)


def _parse_curations_payload(payload: Any) -> PageEnvelope:
    if not isinstance(payload, dict):
        raise SourceFetchError("Unexpected curations payload shape: expected an object")

    meta = payload.get("meta")
    page = meta.get("page") if isinstance(meta, dict) else None
    results = payload.get("results")
    if not isinstance(page, dict):
        raise SourceFetchError("Curations payload is missing meta.page")
    if not isinstance(results, list):
        raise SourceFetchError("Curations payload is missing a results list")

    curations: list[CurationRecord] = []
    for item in results:
        external_id = item.get("id") if isinstance(item, dict) else None
        if not isinstance(external_id, str) or not external_id.strip():
            raise SourceFetchError(f"Curation without an id in payload: {item!r}")
        curations.append(
            CurationRecord(
                external_id=external_id,
                queries=_as_str_tuple(item.get("queries")),
                promoted=_as_str_tuple(item.get("promoted")),
                hidden=_as_str_tuple(item.get("hidden")),
            )
        )

    try:
        return PageEnvelope(
            current_page=int(page["current"]),
            total_pages=int(page["total_pages"]),
            total_results=int(page.get("total_results") or 0),
            page_size=int(page.get("size") or 0),
            results=tuple(curations),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise SourceFetchError(f"Malformed pagination metadata: {page!r}") from exc


def _parse_document_payload(payload: Any, document_id: str) -> EnrichmentDocument | None:
    if not isinstance(payload, list):
        LOGGER.warning("Unexpected document payload for %s: expected a list", document_id)
        return None

    # App Search answers unknown ids with a null entry rather than an empty list.
    found = [item for item in payload if isinstance(item, dict)]
    if not found:
        LOGGER.info("Document %s not found", document_id)
        return None

    document = found[0]
    return EnrichmentDocument(
        document_id=_field_value(document.get("id")) or document_id,
        title=_field_value(document.get("title")) or "",
        language=_field_value(document.get("language")),
    )


def _field_value(value: Any) -> str | None:
    if isinstance(value, dict):
        value = value.get("raw")
    return _as_str(value)


def _as_str(value: Any) -> str | None:
    return value.strip() if isinstance(value, str) and value.strip() else None


def _as_str_tuple(value: Any) -> tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    return tuple(item for item in value if isinstance(item, str))
