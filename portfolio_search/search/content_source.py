"""Similarity search over creator content via the database's RPC endpoints."""

import logging
import time
from typing import Any, Dict, List, Optional, Protocol

import httpx

from ..models.search_params import SearchFilters, SearchParams
from ..models.search_result import PopularSearch
from ..utils.logging import get_logger, log_with_context


logger = get_logger("ContentSearchSource")


SEARCH_RPC = "search_creative_content"
POPULAR_SEARCHES_RPC = "get_popular_searches"
DEFAULT_POPULAR_LIMIT = 5


class ContentSearchSource(Protocol):
    """Anything that returns scored content rows for a query embedding."""

    async def search(
        self,
        embedding: List[float],
        params: SearchParams,
        filters: Optional[SearchFilters] = None
    ) -> List[Dict[str, Any]]:
        ...

    async def popular_searches(self, limit: int = DEFAULT_POPULAR_LIMIT) -> List[PopularSearch]:
        ...


class SupabaseContentSource:
    """
    Calls the vector-search RPC functions of a hosted Postgres (PostgREST).

    ``search_creative_content`` returns one row per matched image or video;
    ``get_popular_searches`` returns the most frequent past queries. Failures
    are raised as RuntimeError without retrying.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        match_threshold: float = 0.1,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize the content source.

        Args:
            base_url: Project URL, e.g. https://xyz.supabase.co
            api_key: Service or anon key sent as apikey and bearer token
            match_threshold: Minimum similarity for a row to be returned
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests use MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.match_threshold = match_threshold
        self.timeout = timeout
        self._transport = transport

    def _headers(self) -> Dict[str, str]:
        return {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    async def _call_rpc(self, name: str, payload: Dict[str, Any]) -> List[Dict[str, Any]]:
        """
        POST to an RPC endpoint and return the decoded row list.

        Raises:
            RuntimeError: On HTTP errors, timeouts or a non-list response
        """
        url = f"{self.base_url}/rest/v1/rpc/{name}"
        start_time = time.time()

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(url, json=payload, headers=self._headers())
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            log_with_context(
                logger,
                logging.ERROR,
                "RPC call returned an error status",
                context={"rpc": name, "status_code": status_code, "body": e.response.text[:500]},
                error_code=str(status_code)
            )
            raise RuntimeError(f"RPC {name} failed: HTTP {status_code}") from e
        except httpx.HTTPError as e:
            logger.error(
                "RPC call failed",
                exc_info=True,
                extra={"context": {"rpc": name, "error": str(e)}}
            )
            raise RuntimeError(f"RPC {name} failed: {str(e)}") from e
        except ValueError as e:
            logger.error(
                "RPC response is not valid JSON",
                exc_info=True,
                extra={"context": {"rpc": name}}
            )
            raise RuntimeError(f"RPC {name} returned invalid JSON") from e

        if data is None:
            data = []
        if not isinstance(data, list):
            raise RuntimeError(f"RPC {name} returned {type(data).__name__}, expected a list")

        log_with_context(
            logger,
            logging.INFO,
            "RPC call successful",
            context={"rpc": name, "row_count": len(data)},
            execution_time_ms=(time.time() - start_time) * 1000
        )
        return data

    async def search(
        self,
        embedding: List[float],
        params: SearchParams,
        filters: Optional[SearchFilters] = None
    ) -> List[Dict[str, Any]]:
        """
        Run the similarity search.

        Args:
            embedding: Query embedding
            params: Normalized parameters (limit and content type are sent)
            filters: Optional role/subject/style/budget filters

        Returns:
            Raw row dictionaries, unvalidated
        """
        payload: Dict[str, Any] = {
            "query_embedding": embedding,
            "match_threshold": self.match_threshold,
            "match_limit": params.limit,
            "content_filter": params.content_type.value,
        }

        # optional arguments are only sent when set
        if filters is not None:
            if filters.role:
                payload["filter_role"] = filters.role
            if filters.subjects:
                payload["filter_subjects"] = filters.subjects
            if filters.styles:
                payload["filter_styles"] = filters.styles
            if filters.max_budget is not None:
                payload["max_budget"] = filters.max_budget

        rows = await self._call_rpc(SEARCH_RPC, payload)
        return [row for row in rows if isinstance(row, dict)]

    async def popular_searches(self, limit: int = DEFAULT_POPULAR_LIMIT) -> List[PopularSearch]:
        """
        Fetch the most frequent queries.

        Args:
            limit: Number of queries to return

        Returns:
            List of PopularSearch, rows without a query are dropped
        """
        rows = await self._call_rpc(POPULAR_SEARCHES_RPC, {"results_limit": limit})

        searches = []
        for row in rows:
            if not isinstance(row, dict) or not row.get("query"):
                continue
            try:
                count = int(row.get("count") or 0)
            except (TypeError, ValueError):
                count = 0
            similarity = row.get("similarity")
            searches.append(PopularSearch(
                query=str(row["query"]),
                count=count,
                similarity=float(similarity) if isinstance(similarity, (int, float)) else None
            ))
        return searches
