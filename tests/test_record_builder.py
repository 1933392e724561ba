from models import CurationRecord, EnrichmentDocument, ResolvedEnrichment
from record_builder import build_record

_NO_ENRICHMENT = ResolvedEnrichment(document=None, language="fi")


def test_full_curation_maps_every_attribute_in_order() -> None:
    curation = CurationRecord(
        external_id="cur-1",
        queries=("running shoes", "sneakers"),
        promoted=("doc-2", "doc-1"),
        hidden=("doc-9",),
    )
    enrichment = ResolvedEnrichment(
        document=EnrichmentDocument(document_id="doc-2", title="Trail Runner", language="en"),
        language="en",
    )

    item = build_record(curation, enrichment, id_factory=lambda: "uuid-1")

    assert item == {
        "id": {"S": "uuid-1"},
        "external_curation_id": {"S": "cur-1"},
        "curation_type": {"S": "standard"},
        "language": {"S": "en"},
        "queries": {"L": [{"S": "running shoes"}, {"S": "sneakers"}]},
        "promoted": {"L": [{"S": "doc-2"}, {"S": "doc-1"}]},
        "document_id": {"S": "doc-2"},
        "hidden": {"L": [{"S": "doc-9"}]},
        "title": {"S": "Trail Runner"},
    }


def test_empty_lists_are_omitted_not_stored_empty() -> None:
    item = build_record(CurationRecord(external_id="cur-2"), _NO_ENRICHMENT)

    for attribute in ("queries", "promoted", "hidden", "document_id", "title"):
        assert attribute not in item
    assert item["language"] == {"S": "fi"}


def test_promoted_without_enrichment_keeps_document_id_but_no_title() -> None:
    curation = CurationRecord(external_id="cur-3", promoted=("doc-7",))

    item = build_record(curation, _NO_ENRICHMENT)

    assert item["document_id"] == {"S": "doc-7"}
    assert "title" not in item


def test_each_build_gets_a_fresh_primary_key() -> None:
    curation = CurationRecord(external_id="cur-4", queries=("q",))

    first = build_record(curation, _NO_ENRICHMENT)
    second = build_record(curation, _NO_ENRICHMENT)

    assert first["id"] != second["id"]
    assert first["id"]["S"] != "cur-4"
    assert first["external_curation_id"] == second["external_curation_id"] == {"S": "cur-4"}
