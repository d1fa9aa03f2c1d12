"""
Base client for external data source clients.

Provides: aiohttp session lifecycle, a per-request deadline, structured
logging, and the DataSourceError hierarchy the web layer maps to responses.
There is deliberately no retry, caching, or rate limiting: every failure is
terminal for the request that triggered it.
"""

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from typing import Any

import aiohttp
from pydantic import BaseModel

from trial_search.constants import DEFAULT_TIMEOUT

logger = logging.getLogger("trial_search.data_sources")


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class ClientConfig(BaseModel):
    """Settings shared by every data source client."""

    timeout_seconds: float = DEFAULT_TIMEOUT


# ---------------------------------------------------------------------------
# Request context (for structured logging)
# ---------------------------------------------------------------------------


class RequestContext(BaseModel):
    """Metadata attached to every outgoing request for logging."""

    source: str  # e.g. "clinical_trials"
    method: str  # e.g. "search_studies"
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


class UpstreamAPIError(DataSourceError):
    """Raised when the API answers non-200 with a well-formed error body.

    ``api_message`` is the API's own message, passed on to the user verbatim.
    """

    def __init__(self, source: str, api_message: str, status_code: int | None = None):
        self.api_message = api_message
        super().__init__(
            source, f"HTTP {status_code}: {api_message}", status_code=status_code
        )


class UpstreamErrorBodyError(DataSourceError):
    """Raised when a non-200 response carries an undecodable error body."""

    pass


class MalformedResponseError(DataSourceError):
    """Raised when a 200 response body cannot be decoded."""

    pass


# ---------------------------------------------------------------------------
# Raw response wrapper
# ---------------------------------------------------------------------------


class UpstreamResponse(BaseModel):
    """Status and undecoded body of a completed upstream request."""

    status: int
    body: str
    elapsed_seconds: float = 0.0


# ---------------------------------------------------------------------------
# Base client
# ---------------------------------------------------------------------------


class BaseClient(ABC):
    """
    Abstract base for REST data source clients.

    Subclasses implement `_source_name` and their own typed methods that
    call `_rest_get()` and decode the returned body.
    """

    def __init__(self, config: ClientConfig | None = None):
        self.config = config or ClientConfig()
        self._session: aiohttp.ClientSession | None = None

    @property
    @abstractmethod
    def _source_name(self) -> str:
        """Identifier for this data source, e.g. 'clinical_trials'."""
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

    # -- Core request -----------------------------------------------------------

    async def _rest_get(
        self,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        context: RequestContext | None = None,
    ) -> UpstreamResponse:
        """
        Make a single GET request and return its status and body.

        Parameters
        ----------
        url : str
            Full URL, query string included.
        headers : dict, optional
            Additional HTTP headers.
        context : RequestContext, optional
            Logging context.

        Raises
        ------
        DataSourceError
            On connection failure or when the configured deadline expires.
            HTTP error statuses are returned, not raised; interpreting them
            is up to the subclass.
        """
        ctx = context or RequestContext(source=self._source_name, method="unknown")
        start = time.monotonic()

        logger.info("Request [%s.%s] url=%s", ctx.source, ctx.method, url)

        try:
            session = await self._get_session()
            resp = await session.get(url, headers=headers)
            body = await resp.text(errors="replace")
        except asyncio.TimeoutError:
            elapsed = time.monotonic() - start
            logger.error(
                "Timeout [%s.%s] elapsed=%.1fs", ctx.source, ctx.method, elapsed
            )
            raise DataSourceError(ctx.source, f"Timeout after {elapsed:.1f}s")
        except aiohttp.ClientError as e:
            logger.error("Connection error [%s.%s]: %s", ctx.source, ctx.method, e)
            raise DataSourceError(ctx.source, f"Connection error: {e}") from e

        elapsed = time.monotonic() - start
        logger.info(
            "Response [%s.%s] status=%d elapsed=%.2fs",
            ctx.source,
            ctx.method,
            resp.status,
            elapsed,
        )
        return UpstreamResponse(status=resp.status, body=body, elapsed_seconds=elapsed)
