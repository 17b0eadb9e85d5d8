"""
SPARQLクライアント

DBpediaのSPARQLエンドポイントにクエリを発行し、
結果をフラットな行（変数名 -> 値）のリストに整形します。
"""

import httpx
from typing import Dict, Any, List, Optional
import logging

from backend.config import SPARQL_QUERY_ENDPOINT, SPARQL_TIMEOUT


logger = logging.getLogger(__name__)


class SPARQLError(Exception):
    """SPARQLクエリ実行に関するエラー"""


class SPARQLResponseError(SPARQLError):
    """エンドポイントのレスポンス形式が不正"""


class SPARQLClient:
    """SPARQLエンドポイント用の非同期クライアント"""

    def __init__(
        self,
        query_endpoint: str = SPARQL_QUERY_ENDPOINT,
        timeout: float = SPARQL_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            query_endpoint: デフォルトのクエリエンドポイント
            timeout: リクエストタイムアウト（秒）
            transport: httpxのトランスポート（テスト用に差し替え可能）
        """
        self.query_endpoint = query_endpoint
        self.timeout = timeout
        self.transport = transport

    async def execute_query(
        self, sparql: str, endpoint: Optional[str] = None
    ) -> Dict[str, Any]:
        """SPARQLクエリを実行し、JSONレスポンスをそのまま返す"""
        endpoint = endpoint or self.query_endpoint
        async with httpx.AsyncClient(
            timeout=self.timeout, transport=self.transport
        ) as client:
            try:
                response = await client.get(
                    endpoint,
                    params={"query": sparql, "format": "json"},
                    headers={"Accept": "application/sparql-results+json"},
                )
                response.raise_for_status()
                return response.json()
            except httpx.HTTPStatusError as e:
                logger.error(f"SPARQL query failed: {e.response.status_code} ({endpoint})")
                raise
            except httpx.RequestError as e:
                logger.error(f"SPARQL request error: {e!r} ({endpoint})")
                raise
            except ValueError as e:
                logger.error(f"SPARQL response is not valid JSON: {e}")
                raise SPARQLResponseError("Endpoint returned a non-JSON response") from e

    async def execute(
        self, sparql: str, endpoint: Optional[str] = None
    ) -> List[Dict[str, str]]:
        """
        SPARQLクエリを実行し、結果を行のリストとして返す

        各行は {変数名: 値の文字列} の辞書（変数の出現順を保持）。
        """
        data = await self.execute_query(sparql, endpoint=endpoint)
        try:
            bindings = data["results"]["bindings"]
        except (KeyError, TypeError) as e:
            raise SPARQLResponseError("Response has no results.bindings") from e

        rows = []
        for binding in bindings:
            rows.append({key: term["value"] for key, term in binding.items()})

        logger.debug(f"SPARQL query returned {len(rows)} rows")
        return rows

    async def check_connection(self) -> bool:
        """エンドポイントへの接続を確認"""
        try:
            await self.execute("SELECT * WHERE { ?s ?p ?o } LIMIT 1")
            return True
        except (httpx.HTTPError, SPARQLError):
            return False


# シングルトンインスタンス
sparql_client = SPARQLClient()
