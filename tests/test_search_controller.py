import pytest
from fastapi.testclient import TestClient

from config.rate_limit import limiter
from controller.controller_dependencies import get_search_service
from core.search_config import SearchConfig
from main import app
from service.search_service import SearchService
from util.cursor import decode_cursor

from fakes import FakeEngine, FakeItemStore, make_item


@pytest.fixture
def engine():
    return FakeEngine(ids=[1, 2])


@pytest.fixture
def client(engine):
    store = FakeItemStore([make_item(1, title="one"), make_item(2, title="two")])
    service = SearchService(SearchConfig(index="item", page_size=2), engine, store)

    app.dependency_overrides[get_search_service] = lambda: service
    limiter.enabled = False
    # no `with`: lifespan would open the database pool
    yield TestClient(app)
    limiter.enabled = True
    app.dependency_overrides.clear()


class TestSearchController:

    def test_search_returns_page(self, client):
        res = client.post("/api/v1/search", json={"q": "bitcoin", "sort": "comments"})

        assert res.status_code == 200
        body = res.json()
        assert [i["id"] for i in body["items"]] == [1, 2]
        assert body["items"][0]["searchTitle"] == "one"
        assert decode_cursor(body["cursor"]).offset == 2

    def test_caller_header_scopes_bookmarks(self, client, engine):
        anonymous = client.post("/api/v1/search", json={"q": "x", "what": "bookmarks"})
        authed = client.post(
            "/api/v1/search",
            json={"q": "x", "what": "bookmarks"},
            headers={"X-User-Id": "8"},
        )

        assert anonymous.json() == {"items": [], "cursor": None}
        assert len(authed.json()["items"]) == 2
        assert len(engine.calls) == 1

    def test_custom_window_aliases(self, client, engine):
        res = client.post(
            "/api/v1/search",
            json={
                "q": "x",
                "when": "custom",
                "from": "2024-01-01T00:00:00Z",
                "to": "2024-01-31T00:00:00Z",
            },
        )

        assert res.status_code == 200
        assert "2024-01-31T00:00:00+00:00" in str(engine.calls[0].body)

    def test_bad_cursor_is_400(self, client):
        res = client.post("/api/v1/search", json={"q": "x", "cursor": "@@@"})

        assert res.status_code == 400
        assert res.json()["detail"] == "Invalid cursor"

    def test_unknown_sort_is_422(self, client):
        res = client.post("/api/v1/search", json={"q": "x", "sort": "random"})
        assert res.status_code == 422

    def test_related(self, client, engine):
        res = client.post("/api/v1/related", json={"id": 42, "minMatch": "20%"})

        assert res.status_code == 200
        assert len(res.json()["items"]) == 2
        assert "20%" in str(engine.calls[0].body)

    def test_healthz(self, client):
        assert client.get("/healthz").json() == {"ok": True}
