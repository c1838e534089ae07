"""Tests for the HTTP endpoints.

The endpoints read the fixture content tree under ``tests/content``; the
configuration dependency is overridden so no environment is needed.
"""

import asyncio

import pytest
from fastapi.routing import APIRoute
from fastapi.testclient import TestClient

from kbase import main
from kbase.config import get_config
from kbase.main import app
from kbase.routers import search as search_router
from kbase.services.search import sanitize_query

client = TestClient(app)


@pytest.fixture(autouse=True)
def site_config(config):
    """Serve the fixture tree and clear the slowapi counter before every test."""
    app.dependency_overrides[get_config] = lambda: config
    app.state.limiter._storage.reset()
    yield
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Navigation
# ---------------------------------------------------------------------------

class TestContentsEndpoints:
    def test_health_check(self):
        resp = client.get("/")
        assert resp.status_code == 200
        assert resp.json()["service"] == "kbase"
        assert resp.json()["status"] == "ok"

    def test_api_handlers_run_in_threadpool(self):
        """Handlers doing file-system work are plain functions, not coroutines."""
        api_routes = [r for r in app.routes if isinstance(r, APIRoute) and r.path.startswith("/api")]
        assert len(api_routes) == 5
        assert not any(asyncio.iscoroutinefunction(r.endpoint) for r in api_routes)

    def test_contents_lists_categories(self):
        resp = client.get("/api/contents", params={"active": "/example-page"})
        assert resp.status_code == 200
        categories = resp.json()["categories"]
        assert categories[0]["is_index"] is True
        assert categories[0]["class"] == "category-index"
        assert categories[0]["files"][0]["active"] is True

    def test_tree_is_nested(self):
        resp = client.get("/api/tree")
        assert resp.status_code == 200
        slugs = [node["slug"] for node in resp.json()]
        assert slugs == [".", "sub", "russian", "private"]
        sub = resp.json()[1]
        assert sub["files"][0]["slug"] == "sub/sub2"
        assert sub["files"][0]["is_directory"] is True

    def test_category_found(self):
        resp = client.get("/api/categories/sub/sub2/")
        assert resp.status_code == 200
        data = resp.json()
        assert data["category"]["slug"] == "sub/sub2"
        assert data["category"]["title"] == "Sub2"
        assert data["body_class"] == "page-sub-sub2"

    def test_category_missing(self):
        resp = client.get("/api/categories/sub/sub-nonexistent/")
        assert resp.status_code == 404


# ---------------------------------------------------------------------------
# Pages
# ---------------------------------------------------------------------------

class TestPageEndpoint:
    def test_renders_page(self):
        resp = client.get("/api/pages/example-page")
        assert resp.status_code == 200
        data = resp.json()
        assert data["page"]["title"] == "Example Page"
        assert data["meta"]["description"] == "An example page used by the test suite"
        assert data["body_class"] == "page-example-page"
        assert data["last_modified"]
        assert data["pages"][0]["files"][0]["active"] is True

    def test_directory_serves_its_index(self):
        resp = client.get("/api/pages/sub")
        assert resp.status_code == 200
        assert resp.json()["page"]["title"] == "Sub Overview"

    def test_home_without_index_document(self):
        resp = client.get("/api/pages/")
        assert resp.status_code == 200
        data = resp.json()
        assert data["page"] is None
        assert data["body_class"] == "page-home"

    def test_missing_page_is_404(self):
        resp = client.get("/api/pages/nonexistent-page")
        assert resp.status_code == 404
        assert resp.json()["detail"] == "Whoops. Looks like this page doesn't exist."

    def test_path_outside_root_is_404(self):
        resp = client.get("/api/pages/%2E%2E/conftest")
        assert resp.status_code == 404


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------

class TestSearchEndpoint:
    def test_search_results(self):
        resp = client.get("/api/search", params={"q": "example"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["query"] == "example"
        assert len(data["results"]) == 4
        assert data["body_class"] == "page-search"

    def test_search_without_hits(self):
        resp = client.get("/api/search", params={"q": "qwerty"})
        assert resp.status_code == 200
        assert resp.json()["results"] == []

    def test_search_query_sanitized(self):
        resp = client.get("/api/search", params={"q": "<script>x</script>example"})
        assert resp.status_code == 200

    def test_search_rate_limited(self):
        for _ in range(30):
            assert client.get("/api/search", params={"q": "qwerty"}).status_code == 200
        assert client.get("/api/search", params={"q": "qwerty"}).status_code == 429

    def test_echoed_query_is_the_searched_query(self, monkeypatch):
        searched = []

        def _record(query, config):
            searched.append(sanitize_query(query))
            return []

        monkeypatch.setattr(search_router, "search", _record)
        resp = client.get("/api/search", params={"q": "&lt;b&gt;example&lt;/b&gt;"})
        assert resp.status_code == 200
        assert resp.json()["query"] == "<b>example</b>"
        assert searched == ["<b>example</b>"]


# ---------------------------------------------------------------------------
# Serving
# ---------------------------------------------------------------------------

class TestServe:
    def test_serve_runs_uvicorn_with_environment(self, monkeypatch):
        calls = []
        monkeypatch.setattr(main.uvicorn, "run", lambda target, **kwargs: calls.append((target, kwargs)))
        monkeypatch.setenv("KBASE_HOST", "0.0.0.0")
        monkeypatch.setenv("KBASE_PORT", "9001")
        main.serve()
        assert calls == [("kbase.main:app", {"host": "0.0.0.0", "port": 9001})]
