"""
Base client for external data source clients.

Provides: lazy aiohttp session management, structured request logging,
and a single error type for upstream failures. Requests are made once;
there is no retry, rate limiting or caching layer.
"""

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from typing import Any

import aiohttp
from pydantic import BaseModel

from affiliation_scout.constants import DEFAULT_TIMEOUT

logger = logging.getLogger("affiliation_scout.data_sources")


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class ClientConfig(BaseModel):
    """Per-client settings: credential and transport timeout."""

    api_key: str = ""
    timeout_seconds: float = DEFAULT_TIMEOUT


# ---------------------------------------------------------------------------
# Request context (for structured logging)
# ---------------------------------------------------------------------------


class RequestContext(BaseModel):
    """Metadata attached to every outgoing request for logging."""

    source: str  # e.g. "pubmed"
    method: str  # e.g. "search", "fetch_detail"
    params: dict[str, Any] = {}


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class DataSourceError(Exception):
    """Base exception for data source failures."""

    def __init__(self, source: str, message: str, status_code: int | None = None):
        self.source = source
        self.status_code = status_code
        super().__init__(f"[{source}] {message}")


class UpstreamError(DataSourceError):
    """Raised when the upstream API answers with a non-success HTTP status."""

    def __init__(self, source: str, status_code: int, body: str = ""):
        message = f"HTTP {status_code}: {body[:500]}" if body else f"HTTP {status_code}"
        super().__init__(source, message, status_code=status_code)


# ---------------------------------------------------------------------------
# Base client
# ---------------------------------------------------------------------------


class BaseClient(ABC):
    """
    Abstract base for upstream API clients.

    Subclasses implement `_source_name` and their own typed methods that
    call `_rest_get()` (JSON bodies) or `_rest_get_xml()` (raw text bodies).
    """

    def __init__(self, config: ClientConfig | None = None):
        self.config = config or ClientConfig()
        self._session: aiohttp.ClientSession | None = None

    @property
    @abstractmethod
    def _source_name(self) -> str:
        """Identifier for this data source, e.g. 'pubmed'."""
        ...

    # -- Session management --------------------------------------------------

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.config.timeout_seconds)
            self._session = aiohttp.ClientSession(timeout=timeout)
        return self._session

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        await self.close()

    # -- Core request ----------------------------------------------------------

    def _with_credentials(self, params: dict[str, Any]) -> dict[str, Any]:
        """Attach the configured API key, if any, to the query parameters."""
        if self.config.api_key:
            return {**params, "api_key": self.config.api_key}
        return params

    async def _request(
        self,
        url: str,
        params: dict[str, Any],
        *,
        as_text: bool = False,
        context: RequestContext | None = None,
    ) -> Any:
        """
        Make a single GET request and return the decoded body.

        Parameters
        ----------
        url : str
            Full URL.
        params : dict
            Query string parameters. The API key is added here.
        as_text : bool
            Return the raw body text instead of decoded JSON.
        context : RequestContext, optional
            Logging context.

        Raises
        ------
        UpstreamError
            The server answered with a status of 400 or above.
        DataSourceError
            The connection failed or timed out.
        """
        ctx = context or RequestContext(source=self._source_name, method="unknown")
        start = time.monotonic()

        logger.info(
            "Request [%s.%s] url=%s params=%s", ctx.source, ctx.method, url, ctx.params
        )

        try:
            session = await self._get_session()
            resp = await session.get(url, params=self._with_credentials(params))

            if resp.status >= 400:
                body = await resp.text()
                logger.warning(
                    "HTTP %d from %s.%s: %s",
                    resp.status,
                    ctx.source,
                    ctx.method,
                    body[:200],
                )
                raise UpstreamError(ctx.source, resp.status, body)

            data = await resp.text() if as_text else await resp.json()

        except asyncio.TimeoutError:
            elapsed = time.monotonic() - start
            logger.warning(
                "Timeout [%s.%s] elapsed=%.1fs", ctx.source, ctx.method, elapsed
            )
            raise DataSourceError(ctx.source, f"Timeout after {elapsed:.1f}s")

        except aiohttp.ClientError as e:
            logger.warning("Connection error [%s.%s]: %s", ctx.source, ctx.method, e)
            raise DataSourceError(ctx.source, f"Connection error: {e}") from e

        logger.info(
            "Success [%s.%s] elapsed=%.2fs",
            ctx.source,
            ctx.method,
            time.monotonic() - start,
        )
        return data

    # -- Convenience methods for subclasses ----------------------------------

    async def _rest_get(
        self,
        url: str,
        params: dict[str, Any],
        *,
        context: RequestContext | None = None,
    ) -> Any:
        """Convenience wrapper for REST GET requests returning JSON."""
        return await self._request(url, params, context=context)

    async def _rest_get_xml(
        self,
        url: str,
        params: dict[str, Any],
        *,
        context: RequestContext | None = None,
    ) -> str:
        """Convenience wrapper for REST GET requests returning XML text."""
        return await self._request(url, params, as_text=True, context=context)
