"""FastAPI application."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from affiliation_scout import __version__
from affiliation_scout.config import get_settings
from affiliation_scout.data_sources.base_client import ClientConfig
from affiliation_scout.data_sources.pubmed import PubMedClient
from affiliation_scout.db.session import get_db, init_db
from affiliation_scout.models.model_search import (
    ErrorResponse,
    HistoryResponse,
    SearchRequest,
    SearchResponse,
)
from affiliation_scout.services.classifier import AffiliationClassifier
from affiliation_scout.services.search_service import SearchValidationError, run_search
from affiliation_scout.services.store import get_results, list_recent_searches

logger = logging.getLogger(__name__)

ERROR_RESPONSES: dict = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    init_db()
    yield


app = FastAPI(
    title="AffiliationScout API",
    description="Search PubMed and report authors with non-academic affiliations",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------


async def get_pubmed_client() -> AsyncIterator[PubMedClient]:
    """Yield a PubMedClient for one request and close its session afterwards."""
    settings = get_settings()
    config = ClientConfig(
        api_key=settings.ncbi_api_key, timeout_seconds=settings.request_timeout
    )
    async with PubMedClient(config, max_results=settings.max_results) as client:
        yield client


def get_classifier() -> AffiliationClassifier:
    return AffiliationClassifier()


# ---------------------------------------------------------------------------
# Error handlers
# ---------------------------------------------------------------------------


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content=ErrorResponse(error=message).model_dump()
    )


@app.exception_handler(SearchValidationError)
async def search_validation_handler(
    request: Request, exc: SearchValidationError
) -> JSONResponse:
    return _error(400, str(exc))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.warning("Invalid request to %s: %s", request.url.path, exc.errors())
    return _error(400, "Invalid request payload")


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Error handling %s", request.url.path, exc_info=exc)
    return _error(500, "Internal server error")


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}


@app.post("/search", response_model=SearchResponse, responses=ERROR_RESPONSES)
async def search(
    payload: SearchRequest,
    db: Session = Depends(get_db),
    client: PubMedClient = Depends(get_pubmed_client),
    classifier: AffiliationClassifier = Depends(get_classifier),
) -> SearchResponse:
    records = await run_search(payload.query, db, client, classifier)
    return SearchResponse(results=records)


@app.get("/history", response_model=HistoryResponse, responses=ERROR_RESPONSES)
def history(db: Session = Depends(get_db)) -> HistoryResponse:
    return HistoryResponse(searches=list_recent_searches(db))


@app.get(
    "/results/{search_id}", response_model=SearchResponse, responses=ERROR_RESPONSES
)
def results(search_id: str, db: Session = Depends(get_db)) -> SearchResponse:
    # Ids that are not integers match no search.
    if not search_id.isdigit():
        return SearchResponse(results=[])
    return SearchResponse(results=get_results(int(search_id), db))
