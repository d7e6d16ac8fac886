"""Persistence of search queries and their extracted records."""

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from affiliation_scout.constants import HISTORY_LIMIT
from affiliation_scout.models.model_pubmed_record import PubmedRecord
from affiliation_scout.models.model_search import SearchQuery
from affiliation_scout.sqlalchemy.results import Results
from affiliation_scout.sqlalchemy.searches import Searches

logger = logging.getLogger(__name__)


class PersistenceError(Exception):
    """Raised when the store cannot read or write."""


def record_search(query: str, db: Session) -> SearchQuery:
    """Insert one row into searches and commit it.

    Args:
        query: The search text as received.
        db: Active SQLAlchemy session.

    Returns:
        The stored SearchQuery, including its new id and timestamp.
    """
    row = Searches(query=query)
    try:
        db.add(row)
        db.commit()
        db.refresh(row)
    except SQLAlchemyError as e:
        db.rollback()
        raise PersistenceError(f"Failed to record search: {e}") from e

    logger.debug("Recorded search %d: %r", row.id, query)
    return SearchQuery.model_validate(row)


def save_records(search_id: int, records: list[PubmedRecord], db: Session) -> None:
    """Insert each record against search_id, committing one row at a time.

    A failure partway leaves the earlier rows in place.
    """
    for record in records:
        row = Results(
            search_id=search_id,
            pubmed_id=record.pmid,
            title=record.title,
            publication_date=record.publication_date,
            non_academic_authors=list(record.non_academic_authors),
            company_affiliations=list(record.company_affiliations),
            corresponding_author_email=record.corresponding_author_email,
        )
        try:
            db.add(row)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            raise PersistenceError(
                f"Failed to save PMID {record.pmid} for search {search_id}: {e}"
            ) from e

    logger.debug("Saved %d records for search %d", len(records), search_id)


def list_recent_searches(db: Session, limit: int = HISTORY_LIMIT) -> list[SearchQuery]:
    """Most recent searches first."""
    stmt = (
        select(Searches)
        .order_by(Searches.timestamp.desc(), Searches.id.desc())
        .limit(limit)
    )
    try:
        rows = db.scalars(stmt).all()
    except SQLAlchemyError as e:
        raise PersistenceError(f"Failed to list searches: {e}") from e
    return [SearchQuery.model_validate(row) for row in rows]


def get_results(search_id: int, db: Session) -> list[PubmedRecord]:
    """All records stored for search_id, in insertion order."""
    stmt = select(Results).where(Results.search_id == search_id).order_by(Results.id)
    try:
        rows = db.scalars(stmt).all()
    except SQLAlchemyError as e:
        raise PersistenceError(f"Failed to load results for search {search_id}: {e}") from e

    return [
        PubmedRecord(
            pmid=row.pubmed_id,
            title=row.title,
            publication_date=row.publication_date,
            non_academic_authors=row.non_academic_authors,
            company_affiliations=row.company_affiliations,
            corresponding_author_email=row.corresponding_author_email,
        )
        for row in rows
    ]
