import json

import httpx
import pytest

from core.entities import SearchQueryDocument
from core.search_config import SearchConfig
from repository.search_index_repository import SearchIndexRepository
from service.search_service import SearchService
from util.errors import SearchEngineError

from fakes import FakeItemStore, make_item


def _repo(handler) -> SearchIndexRepository:
    return SearchIndexRepository(
        "http://search.local:9200/", transport=httpx.MockTransport(handler)
    )


class TestSearchIndexRepository:

    async def test_posts_body_to_index(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"hits": {"hits": []}})

        doc = SearchQueryDocument(index="item", body={"from": 0, "size": 21})
        result = await _repo(handler).search(doc)

        assert result == {"hits": {"hits": []}}
        assert seen["url"] == "http://search.local:9200/item/_search"
        assert seen["body"] == {"from": 0, "size": 21}

    async def test_pipeline_is_a_query_param(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["params"] = dict(request.url.params)
            return httpx.Response(200, json={})

        doc = SearchQueryDocument(index="item", body={}, search_pipeline="nlp-search-pipeline")
        await _repo(handler).search(doc)

        assert seen["params"] == {"search_pipeline": "nlp-search-pipeline"}

    async def test_bad_status_raises(self):
        repo = _repo(lambda request: httpx.Response(503, json={"error": "unavailable"}))

        with pytest.raises(SearchEngineError):
            await repo.search(SearchQueryDocument(index="item", body={}))

    async def test_network_error_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(SearchEngineError):
            await _repo(handler).search(SearchQueryDocument(index="item", body={}))

    async def test_invalid_json_raises(self):
        repo = _repo(lambda request: httpx.Response(200, content=b"<html>"))

        with pytest.raises(SearchEngineError):
            await repo.search(SearchQueryDocument(index="item", body={}))

    @pytest.mark.parametrize(
        "payload",
        [["unexpected"], {"hits": []}, {"hits": {"hits": {"id": 1}}}, "ok"],
    )
    async def test_unexpected_body_raises(self, payload):
        repo = _repo(lambda request: httpx.Response(200, json=payload))

        with pytest.raises(SearchEngineError):
            await repo.search(SearchQueryDocument(index="item", body={}))

    async def test_unexpected_body_degrades_search_to_empty(self):
        repo = _repo(lambda request: httpx.Response(200, json=["unexpected"]))
        store = FakeItemStore([make_item(1)])
        service = SearchService(SearchConfig(index="item"), repo, store)

        page = await service.search("bitcoin")

        assert page.items == []
        assert page.cursor is None
        assert store.fetch_calls == []
