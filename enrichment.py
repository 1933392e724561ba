"""Resolve the display title and language for a curation."""

from __future__ import annotations

import logging
from typing import Protocol

from models import CurationRecord, EnrichmentDocument, ResolvedEnrichment

DEFAULT_FALLBACK_LANGUAGE = "fi"

LOGGER = logging.getLogger(__name__)


class DocumentSource(Protocol):
    def fetch_document(self, document_id: str) -> EnrichmentDocument | None: ...


def resolve_enrichment(
    curation: CurationRecord,
    source: DocumentSource,
    fallback_language: str = DEFAULT_FALLBACK_LANGUAGE,
) -> ResolvedEnrichment:
    """Look up the first promoted document of a curation.

    At most one lookup per curation. With nothing promoted, or when the
    document is missing or carries no language, the fallback language is used.
    """
    if not curation.promoted:
        return ResolvedEnrichment(document=None, language=fallback_language)

    document_id = curation.promoted[0]
    document = source.fetch_document(document_id)
    if document is None:
        LOGGER.info(
            "No enrichment for curation=%s document=%s, using language=%s",
            curation.external_id,
            document_id,
            fallback_language,
        )
        return ResolvedEnrichment(document=None, language=fallback_language)

    return ResolvedEnrichment(document=document, language=document.language or fallback_language)
