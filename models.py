"""Shared typed models for the curation sync job."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CurationRecord:
    """One App Search curation as returned by the source API."""

    external_id: str
    queries: tuple[str, ...] = ()
    promoted: tuple[str, ...] = ()
    hidden: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class PageEnvelope:
    """A single page of curations plus its pagination metadata."""

    current_page: int
    total_pages: int
    total_results: int
    page_size: int
    results: tuple[CurationRecord, ...] = ()

    @property
    def is_last(self) -> bool:
        return self.current_page >= self.total_pages


@dataclass(frozen=True, slots=True)
class EnrichmentDocument:
    document_id: str
    title: str
    language: str | None = None


@dataclass(frozen=True, slots=True)
class ResolvedEnrichment:
    """Outcome of enrichment lookup; language is always populated."""

    document: EnrichmentDocument | None
    language: str


@dataclass(frozen=True, slots=True)
class WriteSummary:
    succeeded: int
    failed: int
    chunks: int


@dataclass(frozen=True, slots=True)
class SyncReport:
    """Final counters reported to the operator at the end of a run."""

    fetched: int
    skipped: int
    pending: int
    written: int
    failed: int
