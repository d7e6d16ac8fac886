"""
PubMed API client.

Two methods:
  1. search       Find PMIDs matching a query (capped at max_results)
  2. fetch_detail Fetch the raw efetch XML for a single PMID
"""

from __future__ import annotations

from typing import Any

from affiliation_scout.constants import (
    DEFAULT_MAX_RESULTS,
    PUBMED_FETCH_URL,
    PUBMED_SEARCH_URL,
)
from affiliation_scout.data_sources.base_client import (
    BaseClient,
    ClientConfig,
    RequestContext,
)


class PubMedClient(BaseClient):
    """Client for querying PubMed/NCBI E-utilities."""

    SEARCH_URL = PUBMED_SEARCH_URL
    FETCH_URL = PUBMED_FETCH_URL

    def __init__(
        self,
        config: ClientConfig | None = None,
        max_results: int = DEFAULT_MAX_RESULTS,
    ) -> None:
        super().__init__(config)
        self.max_results = max_results

    @property
    def _source_name(self) -> str:
        return "pubmed"

    async def search(self, query: str) -> list[str]:
        """Search PubMed and return at most `max_results` PMIDs.

        An empty hit list is returned as []. A non-success response raises
        UpstreamError carrying the status code.
        """
        if not query or not query.strip():
            raise ValueError("query must be non-empty")

        params: dict[str, Any] = {
            "db": "pubmed",
            "term": query,
            "retmode": "json",
            "retmax": self.max_results,
        }
        data = await self._rest_get(
            self.SEARCH_URL,
            params,
            context=RequestContext(
                source=self._source_name, method="search", params={"term": query}
            ),
        )
        pmids: list[str] = (data or {}).get("esearchresult", {}).get("idlist") or []
        return [str(pmid) for pmid in pmids[: self.max_results]]

    async def fetch_detail(self, pmid: str) -> str:
        """Fetch the efetch XML document for one PMID."""
        params = {
            "db": "pubmed",
            "id": pmid,
            "retmode": "xml",
        }
        return await self._rest_get_xml(
            self.FETCH_URL,
            params,
            context=RequestContext(
                source=self._source_name, method="fetch_detail", params={"id": pmid}
            ),
        )
