"""HTTP client for the archive's cerebro endpoints.

Blocking requests calls run in a worker thread so the event loop (and with
it panning, zooming and playback) keeps going while a request is out.
"""

import asyncio
import logging
from datetime import datetime
from typing import Any

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from cerebro.config import settings
from cerebro.errors import ApiError
from cerebro.models import ConceptDetail, Extraction, Graph

logger = logging.getLogger(__name__)


class ArchiveClient:
    """Async-wrapped client for the archive REST API using requests."""

    def __init__(
        self,
        base_url: str | None = None,
        token: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
    ) -> None:
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.token = settings.api_token if token is None else token
        self.timeout = timeout or settings.api_timeout
        self.max_retries = settings.api_max_retries if max_retries is None else max_retries

        self._session: requests.Session | None = None

    def _get_session(self) -> requests.Session:
        """Get or create requests session with connection pooling."""
        if self._session is None:
            self._session = requests.Session()
            self._session.headers.update({"Accept": "application/json"})
            if self.token:
                self._session.headers["Authorization"] = f"Bearer {self.token}"
            # Only GETs are retried; enrich/extract are not idempotent
            adapter = HTTPAdapter(
                max_retries=Retry(
                    total=self.max_retries,
                    backoff_factor=0.5,
                    allowed_methods=frozenset({"GET"}),
                ),
            )
            self._session.mount("http://", adapter)
            self._session.mount("https://", adapter)
        return self._session

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session is not None:
            self._session.close()
            self._session = None

    def _sync_request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Synchronous request (runs in thread)."""
        session = self._get_session()
        try:
            response = session.request(
                method,
                f"{self.base_url}{path}",
                params=params,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise ApiError(str(e)) from e

        if not response.ok:
            # Server errors carry {"error": "..."}; fall back to the reason phrase
            try:
                body = response.json()
            except ValueError:
                body = None
            error = body.get("error") if isinstance(body, dict) else None
            message = error or response.reason
            raise ApiError(message or f"HTTP {response.status_code}", status=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise ApiError(f"Invalid JSON from {path}", status=response.status_code) from e

    async def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        try:
            return await asyncio.to_thread(self._sync_request, method, path, params)
        except ApiError as e:
            logger.error(f"{method} {path} failed: {e.status} - {e.message}")
            raise

    async def fetch_graph(
        self,
        limit: int | None = None,
        group_id: str | None = None,
        since: datetime | None = None,
    ) -> Graph:
        """Fetch the most mentioned concepts and the edges between them."""
        params: dict[str, Any] = {"limit": limit or settings.graph_limit}
        if group_id:
            params["group_id"] = group_id
        if since is not None:
            params["since"] = since.isoformat()

        data = await self._request("GET", "/cerebro/graph", params=params)
        graph = Graph.from_dict(data or {})
        logger.debug(f"Fetched graph: {len(graph.concepts)} concepts, {len(graph.edges)} edges")
        return graph

    async def fetch_concept_detail(self, concept_id: str) -> ConceptDetail:
        """Fetch one concept with its edges and enrichments."""
        data = await self._request("GET", f"/cerebro/concepts/{concept_id}")
        return ConceptDetail.from_dict(data)

    async def enrich_concept(self, concept_id: str) -> ConceptDetail:
        """Run enrichment providers for a concept and return the refreshed detail."""
        data = await self._request("POST", f"/cerebro/concepts/{concept_id}/enrich")
        return ConceptDetail.from_dict(data)

    async def trigger_extraction(self) -> Extraction:
        """Ask the server to extract concepts from the last day of messages."""
        data = await self._request("POST", "/cerebro/extract")
        extraction = Extraction.from_dict(data or {})
        logger.info(
            f"Extraction {extraction.id}: {extraction.concept_count} concepts, "
            f"{extraction.edge_count} edges from {extraction.message_count} messages"
        )
        return extraction
