"""Data models for AffiliationScout."""

from affiliation_scout.models.model_pubmed_record import AuthorEntry, PubmedRecord
from affiliation_scout.models.model_search import (
    ErrorResponse,
    HistoryResponse,
    SearchQuery,
    SearchRequest,
    SearchResponse,
)

__all__ = [
    "AuthorEntry",
    "PubmedRecord",
    "ErrorResponse",
    "HistoryResponse",
    "SearchQuery",
    "SearchRequest",
    "SearchResponse",
]
