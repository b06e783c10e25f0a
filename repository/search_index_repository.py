# repository/search_index_repository.py
from typing import Any, Dict, Optional, Tuple
import httpx
from core.entities import SearchQueryDocument
from util.errors import SearchEngineError
from util.timing import timed
import logging

logger = logging.getLogger(__name__)


class SearchIndexRepository:
    """
    Thin client for the engine's `POST /{index}/_search` endpoint.

    Retries and backoff are not done here; any failure is raised as
    SearchEngineError for the caller to decide.
    """

    def __init__(
        self,
        base_url: str,
        *,
        auth: Optional[Tuple[str, str]] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._auth = auth
        self._timeout = httpx.Timeout(timeout, connect=min(timeout, 5.0))
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            auth=self._auth,
            timeout=self._timeout,
            transport=self._transport,
        )

    async def search(self, doc: SearchQueryDocument) -> Dict[str, Any]:
        params = {"search_pipeline": doc.search_pipeline} if doc.search_pipeline else None
        try:
            with timed(
                logger, "engine.search", index=doc.index, offset=doc.offset
            ) as fields:
                async with self._client() as client:
                    res = await client.post(
                        f"/{doc.index}/_search", params=params, json=doc.body
                    )
                fields["status"] = res.status_code
        except httpx.RequestError as e:
            logger.error("engine.request_error err=%s", type(e).__name__)
            raise SearchEngineError("Search engine request failed") from e

        if res.status_code // 100 != 2:
            logger.error("engine.bad_status %d", res.status_code)
            raise SearchEngineError(f"Search engine answered {res.status_code}")

        try:
            body = res.json()
        except ValueError as e:
            logger.error("engine.bad_body")
            raise SearchEngineError("Search engine returned invalid JSON") from e

        hits = body.get("hits", {}) if isinstance(body, dict) else None
        if not isinstance(hits, dict) or not isinstance(hits.get("hits", []), list):
            logger.error("engine.bad_shape type=%s", type(body).__name__)
            raise SearchEngineError("Search engine returned an unexpected body")
        return body
