"""SPARQLClientのテスト（リクエスト形式、行への整形、失敗の伝播）"""

import httpx
import pytest

from backend.services.sparql_client import SPARQLClient, SPARQLResponseError


ENDPOINT = "https://dbpedia.example/sparql"


def sparql_json(*bindings):
    return {"head": {"vars": []}, "results": {"bindings": list(bindings)}}


def make_client(handler, endpoint: str = ENDPOINT) -> SPARQLClient:
    return SPARQLClient(query_endpoint=endpoint, transport=httpx.MockTransport(handler))


class TestExecute:
    """クエリ実行と結果の整形"""

    @pytest.mark.asyncio
    async def test_sends_query_and_format(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=sparql_json())

        await make_client(handler).execute("SELECT * WHERE { ?s ?p ?o }")

        request = seen[0]
        assert request.method == "GET"
        assert str(request.url).startswith(ENDPOINT)
        assert request.url.params["query"] == "SELECT * WHERE { ?s ?p ?o }"
        assert request.url.params["format"] == "json"
        assert request.headers["Accept"] == "application/sparql-results+json"

    @pytest.mark.asyncio
    async def test_reshapes_bindings_to_flat_rows(self):
        def handler(request):
            return httpx.Response(200, json=sparql_json(
                {
                    "uri": {"type": "uri", "value": "http://dbpedia.org/resource/Shueisha"},
                    "label": {"type": "literal", "xml:lang": "en", "value": "Shueisha"},
                },
                {
                    "uri": {"type": "literal", "value": "Martial arts"},
                },
            ))

        rows = await make_client(handler).execute("SELECT ...")

        assert rows == [
            {"uri": "http://dbpedia.org/resource/Shueisha", "label": "Shueisha"},
            {"uri": "Martial arts"},
        ]
        assert list(rows[0]) == ["uri", "label"]

    @pytest.mark.asyncio
    async def test_zero_rows(self):
        rows = await make_client(lambda request: httpx.Response(200, json=sparql_json())).execute("SELECT ...")
        assert rows == []

    @pytest.mark.asyncio
    async def test_endpoint_override_per_call(self):
        hosts = []

        def handler(request):
            hosts.append(request.url.host)
            return httpx.Response(200, json=sparql_json())

        client = make_client(handler)
        await client.execute("SELECT ...", endpoint="https://mirror.example/sparql")
        await client.execute("SELECT ...")

        assert hosts == ["mirror.example", "dbpedia.example"]


class TestFailures:
    """失敗はリトライせずに送出される"""

    @pytest.mark.asyncio
    async def test_http_error_propagates(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(500, text="Virtuoso 37000 Error SP030: SPARQL compiler")

        with pytest.raises(httpx.HTTPStatusError):
            await make_client(handler).execute("SELECT broken")
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_transport_error_propagates(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(httpx.ConnectError):
            await make_client(handler).execute("SELECT ...")

    @pytest.mark.asyncio
    async def test_missing_results_is_response_error(self):
        client = make_client(lambda request: httpx.Response(200, json={"boolean": True}))
        with pytest.raises(SPARQLResponseError):
            await client.execute("ASK { ?s ?p ?o }")

    @pytest.mark.asyncio
    async def test_non_json_body_is_response_error(self):
        client = make_client(lambda request: httpx.Response(200, text="<html>maintenance</html>"))
        with pytest.raises(SPARQLResponseError):
            await client.execute("SELECT ...")


class TestCheckConnection:
    """接続確認"""

    @pytest.mark.asyncio
    async def test_connected(self):
        client = make_client(lambda request: httpx.Response(200, json=sparql_json()))
        assert await client.check_connection() is True

    @pytest.mark.asyncio
    async def test_disconnected(self):
        client = make_client(lambda request: httpx.Response(503))
        assert await client.check_connection() is False
