"""
マンガ検索サービス

検索文字列から候補マンガURIを取得し、各URIのMangaレコードを並列に組み立てます。
"""

import logging
from typing import List, Optional, Union

from backend.config import MAX_RESULTS_LENGTH, SEARCH_JOIN_POLICY
from backend.models.schemas import Manga, SearchMode
from backend.services.entity_assembler import EntityAssembler
from backend.services.join import JoinPolicy, join_all
from backend.services.query_builder import (
    InvalidEntityURIError,
    build_autocomplete_query,
    build_discovery_query,
    format_uri,
    sanitize_name,
)
from backend.services.sparql_client import SPARQLClient, sparql_client


logger = logging.getLogger(__name__)


class MangaSearchService:
    """マンガ検索を行うクラス"""

    def __init__(
        self,
        client: SPARQLClient = sparql_client,
        assembler: Optional[EntityAssembler] = None,
        max_results: int = MAX_RESULTS_LENGTH,
        entity_policy: Union[JoinPolicy, str] = SEARCH_JOIN_POLICY,
    ):
        """
        Args:
            client: SPARQLクライアント
            assembler: エンティティアセンブラー。未指定の場合は同じクライアントで生成
            max_results: 1回の検索で組み立てるマンガの最大件数
            entity_policy: マンガ1件の組み立てが失敗したときのポリシー
        """
        self.client = client
        self.assembler = assembler or EntityAssembler(client)
        self.max_results = max_results
        self.entity_policy = JoinPolicy(entity_policy)

    async def discover(self, mode: SearchMode, raw_input: str) -> List[str]:
        """検索条件に合う候補マンガURIを取得（重複なし、最大 max_results 件）"""
        mode = SearchMode(mode)
        query = build_discovery_query(mode, sanitize_name(raw_input), self.max_results)
        rows = await self.client.execute(query)

        uris: List[str] = []
        for row in rows:
            uri = row.get("manga")
            if not uri or uri in uris:
                continue
            try:
                format_uri(uri)
            except InvalidEntityURIError as e:
                logger.warning(f"Skipping candidate that is not a valid IRI: {e}")
                continue
            uris.append(uri)
        # エンドポイントがLIMITを無視した場合に備えて件数を制限
        uris = uris[: self.max_results]

        logger.info(f"{mode.value} '{raw_input}': {len(uris)} candidates")
        return uris

    async def search(self, mode: SearchMode, raw_input: str) -> List[Manga]:
        """
        マンガを検索

        Args:
            mode: 検索モード
            raw_input: ユーザーの入力文字列

        Returns:
            Mangaのリスト（候補URIの順序を保持）
        """
        uris = await self.discover(mode, raw_input)
        results = await join_all(
            [self.search_by_uri(uri) for uri in uris],
            policy=self.entity_policy,
            names=uris,
        )
        # DEGRADEで失敗したマンガは結果から除外
        return [manga for manga in results if manga is not None]

    async def search_by_uri(self, uri: str) -> Manga:
        """既知のマンガURIからMangaレコードを取得"""
        return await self.assembler.assemble(uri)

    async def autocomplete(self, mode: SearchMode) -> List[str]:
        """検索モードに応じたオートコンプリート候補を取得"""
        rows = await self.client.execute(build_autocomplete_query(SearchMode(mode)))

        labels: List[str] = []
        seen = set()
        for row in rows:
            label = (row.get("label") or "").strip()
            if label and label not in seen:
                seen.add(label)
                labels.append(label)
        return labels


# シングルトンインスタンス
manga_search_service = MangaSearchService()
