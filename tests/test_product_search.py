import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from voyageai.error import VoyageError

from conftest import make_product
from errors import SearchServiceError
from product_search import ProductSearchService
from response_models import SearchType


def docs(*products):
    return SimpleNamespace(docs=[
        SimpleNamespace(id=f"product:{p.item_id}", payload=p.model_dump_json(), vector_score="0.1")
        for p in products
    ])


def fake_redis(*results):
    redis_client = MagicMock()
    redis_client.ft.return_value.search = AsyncMock(side_effect=list(results))
    return redis_client


def fake_embeddings(vector=(0.1, 0.2, 0.3), error=None):
    client = MagicMock()
    client.embed = AsyncMock(return_value=SimpleNamespace(embeddings=[list(vector)]), side_effect=error)
    return client


@pytest.fixture
def sofa():
    return make_product("SF-001", "Sofa Oslo")


class TestVectorSearch:

    async def test_knn_query_with_filter(self, sofa):
        redis_client = fake_redis(docs(sofa))
        service = ProductSearchService(redis_client, fake_embeddings(), index_name="idx:products")

        result = await service.search("sofa putih", {"category": "sofa", "color": "putih"}, n=5)

        assert result.search_type == SearchType.VECTOR
        assert result.count == 1
        assert result.products[0].item_id == "SF-001"
        redis_client.ft.assert_called_with("idx:products")
        query, params = redis_client.ft.return_value.search.await_args.args
        assert query.query_string() == "(@category:{sofa} @color:{putih})=>[KNN 5 @vector $query_vector AS vector_score]"
        assert len(params["query_vector"]) == 3 * 4

    async def test_embedding_uses_query_input_type(self, sofa):
        embeddings = fake_embeddings()
        service = ProductSearchService(fake_redis(docs(sofa)), embeddings, embedding_model="voyage-3")
        await service.search("sofa")
        embeddings.embed.assert_awaited_once_with(["sofa"], model="voyage-3", input_type="query")

    async def test_empty_vector_result_falls_back_to_text(self, sofa):
        redis_client = fake_redis(docs(), docs(sofa))
        service = ProductSearchService(redis_client, fake_embeddings())

        result = await service.search("sofa")

        assert result.search_type == SearchType.TEXT
        assert result.count == 1

    async def test_vector_mode_does_not_fall_back(self):
        service = ProductSearchService(fake_redis(docs()), fake_embeddings())
        result = await service.search("sofa", mode="vector")
        assert result.search_type == SearchType.NONE
        assert result.count == 0


class TestTextSearch:

    async def test_embedding_failure_in_auto_mode_uses_text(self, sofa):
        redis_client = fake_redis(docs(sofa))
        service = ProductSearchService(redis_client, fake_embeddings(error=VoyageError("down")))

        result = await service.search("sofa putih", {"priceMax": 3000000})

        assert result.search_type == SearchType.TEXT
        query = redis_client.ft.return_value.search.await_args.args[0]
        assert query.query_string() == "@search_text:(sofa|putih) @price:[-inf 3000000]"

    async def test_embedding_failure_in_vector_mode_raises(self):
        service = ProductSearchService(fake_redis(), fake_embeddings(error=VoyageError("down")))
        with pytest.raises(SearchServiceError):
            await service.search("sofa", mode="vector")

    async def test_text_mode_skips_embeddings(self, sofa):
        embeddings = fake_embeddings()
        service = ProductSearchService(fake_redis(docs(sofa)), embeddings)
        result = await service.search("sofa", mode="text")
        assert result.search_type == SearchType.TEXT
        embeddings.embed.assert_not_awaited()

    async def test_no_results_is_none(self):
        service = ProductSearchService(fake_redis(docs()), None)
        result = await service.search("lemari")
        assert result.search_type == SearchType.NONE
        assert result.products == []


class TestFailures:

    async def test_redis_error(self):
        service = ProductSearchService(fake_redis(RedisConnectionError("refused")), None)
        with pytest.raises(SearchServiceError) as exc_info:
            await service.search("sofa")
        assert exc_info.value.query == "sofa"

    async def test_timeout(self):
        async def slow(*args, **kwargs):
            await asyncio.sleep(1)

        redis_client = MagicMock()
        redis_client.ft.return_value.search = slow
        service = ProductSearchService(redis_client, None, timeout=0.01)
        with pytest.raises(SearchServiceError, match="timed out"):
            await service.search("sofa")

    async def test_missing_client(self):
        with pytest.raises(SearchServiceError):
            await ProductSearchService(None, None).search("sofa")

    async def test_unknown_mode(self):
        with pytest.raises(ValueError):
            await ProductSearchService(fake_redis(), None).search("sofa", mode="hybrid")

    async def test_malformed_documents_skipped(self, sofa):
        result_docs = docs(sofa)
        result_docs.docs.append(SimpleNamespace(id="product:bad", payload='{"item_name": 1}'))
        service = ProductSearchService(fake_redis(result_docs), None)
        result = await service.search("sofa")
        assert [p.item_id for p in result.products] == ["SF-001"]
