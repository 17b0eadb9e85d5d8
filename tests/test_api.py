"""HTTP APIのテスト"""

from datetime import date
from unittest.mock import AsyncMock

import httpx
import pytest
from fastapi.testclient import TestClient

from backend.main import app
from backend.models.schemas import Manga, SearchMode
from backend.routers import manga as manga_router
from backend.routers import search as search_router
from backend.services.query_builder import InvalidEntityURIError
from backend.services.search_service import MangaSearchService

from tests.helpers.sparql import NARUTO, naruto_client


@pytest.fixture
def service(monkeypatch):
    mock = AsyncMock()
    monkeypatch.setattr(search_router, "manga_search_service", mock)
    monkeypatch.setattr(manga_router, "manga_search_service", mock)
    return mock


@pytest.fixture
def client():
    return TestClient(app)


def naruto() -> Manga:
    return Manga(
        titleEnglish="Naruto",
        authors=["Masashi Kishimoto"],
        firstPublicationDate=date(1999, 9, 21),
        source="DBPedia",
        sourceURL=NARUTO,
    )


class TestSearchEndpoint:
    """/api/search のテスト"""

    def test_returns_records_without_absent_fields(self, client, service):
        service.search.return_value = [naruto()]

        response = client.get("/api/search", params={"mode": "byName", "q": "Naruto"})

        assert response.status_code == 200
        body = response.json()
        assert body["meta"] == {"mode": "byName", "query": "Naruto", "count": 1}
        assert body["results"] == [{
            "titleEnglish": "Naruto",
            "authors": ["Masashi Kishimoto"],
            "firstPublicationDate": "1999-09-21",
            "source": "DBPedia",
            "sourceURL": NARUTO,
        }]
        service.search.assert_awaited_once_with(SearchMode.BY_NAME, "Naruto")

    def test_default_mode_is_by_name(self, client, service):
        service.search.return_value = []
        client.get("/api/search", params={"q": "bleach"})
        service.search.assert_awaited_once_with(SearchMode.BY_NAME, "bleach")

    def test_unknown_mode_rejected(self, client, service):
        response = client.get("/api/search", params={"mode": "byYear", "q": "1999"})
        assert response.status_code == 422
        service.search.assert_not_awaited()

    def test_missing_query_rejected(self, client, service):
        assert client.get("/api/search", params={"mode": "byGenre"}).status_code == 422

    def test_endpoint_failure_is_bad_gateway(self, client, service):
        service.search.side_effect = httpx.ConnectError("connection refused")
        response = client.get("/api/search", params={"q": "naruto"})
        assert response.status_code == 502

    def test_invalid_candidate_iri_is_skipped(self, client, monkeypatch):
        fake = naruto_client(discovery=[
            {"manga": NARUTO},
            {"manga": "http://dbpedia.org/resource/A^B`C"},
        ])
        monkeypatch.setattr(search_router, "manga_search_service", MangaSearchService(fake))

        response = client.get("/api/search", params={"q": "x"})

        assert response.status_code == 200
        assert [m["sourceURL"] for m in response.json()["results"]] == [NARUTO]


class TestMangaEndpoint:
    """/api/manga のテスト"""

    def test_lookup_by_uri(self, client, service):
        service.search_by_uri.return_value = naruto()

        response = client.get("/api/manga", params={"uri": NARUTO})

        assert response.status_code == 200
        assert response.json()["sourceURL"] == NARUTO
        assert "genres" not in response.json()
        service.search_by_uri.assert_awaited_once_with(NARUTO)

    def test_invalid_uri_is_bad_request(self, client, service):
        service.search_by_uri.side_effect = InvalidEntityURIError("Not an absolute URI: 'Naruto'")
        assert client.get("/api/manga", params={"uri": "Naruto"}).status_code == 400


class TestAutocompleteEndpoint:
    """/api/autocomplete のテスト"""

    def test_labels(self, client, service):
        service.autocomplete.return_value = ["Naruto", "Nana"]

        response = client.get("/api/autocomplete", params={"mode": "byName"})

        assert response.status_code == 200
        assert response.json() == {"mode": "byName", "labels": ["Naruto", "Nana"]}


class TestRoot:
    """サービス情報のテスト"""

    def test_root(self, client):
        assert client.get("/").json()["name"] == "MangaKG API"
