"""Pydantic models for search requests, history and API responses."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from affiliation_scout.models.model_pubmed_record import PubmedRecord


class SearchQuery(BaseModel):
    """A logged search request."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    query: str
    timestamp: datetime


class SearchRequest(BaseModel):
    """Body of POST /search. Blank or missing queries are rejected by the handler."""

    query: str | None = None


class SearchResponse(BaseModel):
    results: list[PubmedRecord] = []


class HistoryResponse(BaseModel):
    searches: list[SearchQuery] = []


class ErrorResponse(BaseModel):
    error: str
