"""CLI entrypoint for the App Search -> DynamoDB curation sync."""

from __future__ import annotations

import argparse
import logging
import os
import sys

from dotenv import load_dotenv

from app_search_client import AppSearchClient, SourceFetchError
from dynamodb_store import DEFAULT_TABLE_NAME, DedupCheckError, DynamoCurationStore, create_dynamodb_client
from enrichment import DEFAULT_FALLBACK_LANGUAGE, resolve_enrichment
from models import CurationRecord, SyncReport
from record_builder import DynamoItem, build_record


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line flags, falling back to environment variables."""
    parser = argparse.ArgumentParser(
        description="Get curations from Elastic App Search and persist them into AWS DynamoDB"
    )
    parser.add_argument("-u", "--url", default=os.getenv("APP_SEARCH_URL"), help="App Search base URL")
    parser.add_argument("-a", "--api-key", default=os.getenv("APP_SEARCH_API_KEY"), help="App Search private API key")
    parser.add_argument("-e", "--engine", default=os.getenv("APP_SEARCH_ENGINE"), help="App Search engine name")
    parser.add_argument("-r", "--region", default=os.getenv("AWS_REGION"), help="AWS region of the DynamoDB table")
    parser.add_argument(
        "--table",
        default=os.getenv("CURATIONS_TABLE", DEFAULT_TABLE_NAME),
        help="DynamoDB table receiving the curations",
    )
    parser.add_argument(
        "--fallback-language",
        default=os.getenv("FALLBACK_LANGUAGE", DEFAULT_FALLBACK_LANGUAGE),
        help="Language stored when no promoted document provides one",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Fetch and build items, but skip the DynamoDB writes",
    )
    args = parser.parse_args(argv)

    missing = [
        flag
        for flag, value in (
            ("--url", args.url),
            ("--api-key", args.api_key),
            ("--engine", args.engine),
            ("--region", args.region),
        )
        if not value
    ]
    if missing:
        parser.error(f"missing required configuration: {', '.join(missing)}")
    return args


def fetch_all_curations(client: AppSearchClient) -> list[CurationRecord]:
    """Page through every curation, starting at page 1. Errors propagate."""
    curations: list[CurationRecord] = []
    page_number = 1

    while True:
        page = client.fetch_curations_page(page_number)
        curations.extend(page.results)
        logging.info("Retrieved page %s/%s of curations", page.current_page, page.total_pages)
        if page.is_last:
            break
        page_number += 1

    logging.info("All %s curations retrieved", len(curations))
    return curations


def build_pending_items(
    curations: list[CurationRecord],
    client: AppSearchClient,
    store: DynamoCurationStore,
    fallback_language: str,
) -> tuple[list[DynamoItem], int, int]:
    """Return (items to write, skipped count, dedup failure count)."""
    pending: list[DynamoItem] = []
    skipped = 0
    failed = 0

    for curation in curations:
        try:
            exists = store.curation_exists(curation.external_id)
        except DedupCheckError as exc:
            # Indeterminate; the next run checks this curation again.
            failed += 1
            logging.error("Skipping curation=%s: %s", curation.external_id, exc)
            continue

        if exists:
            skipped += 1
            logging.debug("Curation %s already synced, skipping", curation.external_id)
            continue

        enrichment = resolve_enrichment(curation, client, fallback_language=fallback_language)
        pending.append(build_record(curation, enrichment))

    return pending, skipped, failed


def run(
    client: AppSearchClient,
    store: DynamoCurationStore,
    fallback_language: str = DEFAULT_FALLBACK_LANGUAGE,
    dry_run: bool = False,
) -> SyncReport:
    """Run one sync cycle: fetch all pages, build new items, write them."""
    logging.info("Proceeding to get curations from App Search...")
    curations = fetch_all_curations(client)

    logging.info("Proceeding to persist curations in DynamoDB table=%s...", store.table_name)
    pending, skipped, failed = build_pending_items(curations, client, store, fallback_language)
    logging.info(
        "Transform complete. fetched=%s skipped=%s pending=%s",
        len(curations),
        skipped,
        len(pending),
    )

    written = 0
    if not pending:
        logging.info("No new curations to add!")
    elif dry_run:
        for item in pending:
            logging.info("[dry-run] Would write curation=%s", item["external_curation_id"]["S"])
    else:
        summary = store.write_items(pending)
        written = summary.succeeded
        failed += summary.failed

    report = SyncReport(
        fetched=len(curations),
        skipped=skipped,
        pending=len(pending),
        written=written,
        failed=failed,
    )
    logging.info(
        "Run complete. fetched=%s skipped=%s pending=%s written=%s failed=%s",
        report.fetched,
        report.skipped,
        report.pending,
        report.written,
        report.failed,
    )
    logging.info("Failed to persist %s curations", report.failed)
    return report


def main(argv: list[str] | None = None) -> None:
    """Initialize config and execute the sync."""
    load_dotenv()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    args = parse_args(argv)

    client = AppSearchClient(base_url=args.url, engine=args.engine, api_key=args.api_key)
    store = DynamoCurationStore(create_dynamodb_client(args.region), table_name=args.table)

    try:
        run(client, store, fallback_language=args.fallback_language, dry_run=args.dry_run)
    except SourceFetchError as exc:
        logging.exception("Aborting sync: %s", exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
