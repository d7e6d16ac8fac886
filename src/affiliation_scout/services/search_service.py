"""Search pipeline: log the query, search PubMed, extract each record, persist."""

import asyncio
import logging

from sqlalchemy.orm import Session

from affiliation_scout.data_sources.base_client import DataSourceError
from affiliation_scout.data_sources.pubmed import PubMedClient
from affiliation_scout.models.model_pubmed_record import PubmedRecord
from affiliation_scout.services.classifier import AffiliationClassifier
from affiliation_scout.services.extractor import ExtractionError, extract_record
from affiliation_scout.services.store import record_search, save_records

logger = logging.getLogger(__name__)


class SearchValidationError(ValueError):
    """Raised when a search request carries no usable query."""


def validate_query(query: str | None) -> str:
    """Return the query unchanged, or raise if it is missing or blank."""
    if query is None or not query.strip():
        raise SearchValidationError("Search query is required")
    return query


async def collect_records(
    pmids: list[str],
    client: PubMedClient,
    classifier: AffiliationClassifier,
) -> list[PubmedRecord]:
    """Fetch and extract each PMID in turn, skipping the ones that fail.

    Args:
        pmids: PMIDs in search order.
        client: Open PubMedClient (owned by the caller).
        classifier: Classifier applied to every affiliation.

    Returns:
        One PubmedRecord per PMID whose fetch and extraction succeeded,
        in the order of pmids.
    """
    records: list[PubmedRecord] = []
    for pmid in pmids:
        try:
            xml = await client.fetch_detail(pmid)
            records.append(extract_record(pmid, xml, classifier))
        except (DataSourceError, ExtractionError) as e:
            logger.warning("Skipping PMID %s: %s", pmid, e)
    return records


async def run_search(
    query: str | None,
    db: Session,
    client: PubMedClient,
    classifier: AffiliationClassifier | None = None,
) -> list[PubmedRecord]:
    """Run one search end to end.

    The query row is committed before PubMed is contacted. Store calls run
    in a worker thread so a slow commit does not block the event loop.
    Search failures (UpstreamError) and store failures (PersistenceError)
    propagate; only per-PMID fetch and extraction problems are absorbed.
    """
    query = validate_query(query)
    classifier = classifier or AffiliationClassifier()

    search = await asyncio.to_thread(record_search, query, db)
    pmids = await client.search(query)
    logger.info("Search %d %r returned %d PMIDs", search.id, query, len(pmids))

    if not pmids:
        return []

    records = await collect_records(pmids, client, classifier)
    await asyncio.to_thread(save_records, search.id, records, db)
    return records
