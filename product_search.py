"""
Product Search Module

Searches the furniture catalog stored in Redis. Each product is a hash with:
- payload: the Product as JSON
- search_text: TEXT, name + description + categories
- category, color, material, brand: TAG
- price: NUMERIC, lowest variant price
- vector: VECTOR (FLOAT32), Voyage document embedding of search_text

Mode "auto" runs a KNN query over the Voyage query embedding and falls back to
a full-text query when embeddings are unavailable or the KNN query finds
nothing. Redis failures are raised as SearchServiceError; an empty result is
a valid answer with search_type "none".
"""

import asyncio
from typing import Any, Dict, List, Optional

import numpy as np
from pydantic import ValidationError
from redis.commands.search.query import Query
from redis.exceptions import RedisError
from voyageai.error import VoyageError

from config import EMBEDDING_MODEL, PRODUCT_INDEX_NAME, SEARCH_RESULT_LIMIT, SEARCH_TIMEOUT_SECONDS
from errors import SearchServiceError
from logger_config import log_detailed_error, logger
from redis_filter_utils import build_filter_from_state, create_text_clause
from response_models import Product, SearchResult, SearchType

SEARCH_MODES = ("auto", "vector", "text")


class ProductSearchService:
    """Vector / text product search over the Redis catalog index."""

    def __init__(self, redis_client=None, embedding_client=None, index_name: str = PRODUCT_INDEX_NAME,
                 embedding_model: str = EMBEDDING_MODEL, timeout: float = SEARCH_TIMEOUT_SECONDS):
        self.redis_client = redis_client
        self.embedding_client = embedding_client
        self.index_name = index_name
        self.embedding_model = embedding_model
        self.timeout = timeout

    async def search(self, query: str, filters: Optional[Dict[str, Any]] = None,
                     n: int = SEARCH_RESULT_LIMIT, mode: str = "auto") -> SearchResult:
        """
        Search products.

        Args:
            query: Search query text
            filters: Persisted filter map (category, color, material, brand, priceMin, priceMax)
            n: Maximum number of products
            mode: "auto", "vector" or "text"

        Returns:
            SearchResult with products, count and the search path used

        Raises:
            SearchServiceError: Redis or embedding failure, or timeout
        """
        if mode not in SEARCH_MODES:
            raise ValueError(f"Unknown search mode: {mode}")
        if self.redis_client is None:
            raise SearchServiceError("Redis client not initialized", query=query)

        try:
            result = await asyncio.wait_for(self._search(query, filters or {}, n, mode), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            logger.error(f"Product search timed out after {self.timeout}s for query '{query}'")
            raise SearchServiceError(f"Search timed out after {self.timeout}s", query=query) from e
        except RedisError as e:
            log_detailed_error(e, context="ProductSearchService.search",
                               local_vars={"query": query, "filters": filters, "mode": mode})
            raise SearchServiceError(f"Redis search failed: {e}", query=query) from e

        logger.info(f"Search '{query}' ({mode}) -> {result.count} products via {result.search_type.value}")
        return result

    async def _search(self, query: str, filters: Dict[str, Any], n: int, mode: str) -> SearchResult:
        combined_filter = build_filter_from_state(filters)

        if mode in ("auto", "vector"):
            embedding = await self._embed_query(query, required=(mode == "vector"))
            if embedding is not None:
                products = await self._vector_search(embedding, combined_filter, n)
                if products or mode == "vector":
                    return self._result(products, SearchType.VECTOR)
                logger.info(f"Vector search found nothing for '{query}', trying text search")

        products = await self._text_search(query, combined_filter, n)
        return self._result(products, SearchType.TEXT)

    async def _embed_query(self, query: str, required: bool) -> Optional[List[float]]:
        if self.embedding_client is None:
            if required:
                raise SearchServiceError("Embedding client not initialized", query=query)
            return None
        try:
            response = await self.embedding_client.embed([query], model=self.embedding_model, input_type="query")
        except VoyageError as e:
            if required:
                raise SearchServiceError(f"Embedding failed: {e}", query=query) from e
            logger.warning(f"Query embedding failed, using text search: {e}")
            return None
        return response.embeddings[0]

    async def _vector_search(self, embedding: List[float], combined_filter: str, n: int) -> List[Product]:
        redis_query = (
            Query(f'({combined_filter})=>[KNN {n} @vector $query_vector AS vector_score]')
            .sort_by('vector_score')
            .return_fields('payload', 'vector_score')
            .paging(0, n)
            .dialect(2)
        )
        query_vector_bytes = np.array(embedding, dtype=np.float32).tobytes()
        results = await self.redis_client.ft(self.index_name).search(
            redis_query,
            {'query_vector': query_vector_bytes}
        )
        return self._parse_docs(results.docs)

    async def _text_search(self, query: str, combined_filter: str, n: int) -> List[Product]:
        text_clause = create_text_clause(query)
        if not text_clause:
            return []
        query_string = text_clause if combined_filter == "*" else f"{text_clause} {combined_filter}"
        redis_query = Query(query_string).return_fields('payload').paging(0, n).dialect(2)
        results = await self.redis_client.ft(self.index_name).search(redis_query)
        return self._parse_docs(results.docs)

    @staticmethod
    def _parse_docs(docs) -> List[Product]:
        products = []
        for doc in docs:
            payload = getattr(doc, 'payload', None)
            if not payload:
                continue
            try:
                products.append(Product.model_validate_json(payload))
            except ValidationError as e:
                logger.warning(f"Skipping malformed product document {getattr(doc, 'id', '?')}: {e}")
        return products

    @staticmethod
    def _result(products: List[Product], search_type: SearchType) -> SearchResult:
        return SearchResult(
            products=products,
            count=len(products),
            search_type=search_type if products else SearchType.NONE,
        )
