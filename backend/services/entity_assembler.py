"""
エンティティアセンブラー

1つのマンガURIについて、説明クエリと8種類の属性クエリを並列に発行し、
結果を1件のMangaレコードにまとめます。
"""

import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Union

from dateutil import parser as date_parser

from backend.config import ATTRIBUTE_JOIN_POLICY, DATA_SOURCE
from backend.models.schemas import AttributeKind, AttributeValue, Manga
from backend.services.attribute_resolver import AttributeResolver
from backend.services.join import JoinPolicy, join_all
from backend.services.query_builder import (
    MANGA_TITLE_SUFFIX,
    build_description_query,
    strip_angle_brackets,
)
from backend.services.sparql_client import SPARQLClient, sparql_client


logger = logging.getLogger(__name__)

GENRE_SUFFIX = " (genre)"

# 説明クエリで取得するテキスト属性
TEXT_FIELDS = ("titleEnglish", "titleRomaji", "titleKanji", "description")

# 月日が省略された日付の補完値
_DEFAULT_DATE = datetime(2000, 1, 1)


def strip_suffix(text: str, suffix: str) -> str:
    """末尾の曖昧さ回避サフィックスを除去（何度適用しても結果は同じ）"""
    while suffix and text.endswith(suffix):
        text = text[: -len(suffix)]
    return text


def parse_publication_date(value: Optional[str]) -> Optional[date]:
    """
    刊行日の文字列を日付に変換

    DBpediaの日付は "2014-11-10" 形式のほか "November 2014" などの
    自由記述もあるため、パースできなければNoneを返す。
    """
    if not value or not value.strip():
        return None
    try:
        return date_parser.parse(value.strip(), default=_DEFAULT_DATE).date()
    except (ValueError, OverflowError) as e:
        logger.debug(f"日付パースエラー: {value!r} - {e}")
        return None


def parse_volume_count(value: Optional[str]) -> Optional[int]:
    """巻数を整数に変換（不正な値はNone）"""
    if value is None:
        return None
    try:
        return int(float(value.strip()))
    except (ValueError, OverflowError):
        return None


class EntityAssembler:
    """マンガURIからMangaレコードを組み立てるクラス"""

    def __init__(
        self,
        client: SPARQLClient = sparql_client,
        resolver: Optional[AttributeResolver] = None,
        attribute_policy: Union[JoinPolicy, str] = ATTRIBUTE_JOIN_POLICY,
    ):
        """
        Args:
            client: SPARQLクライアント
            resolver: 属性リゾルバー。未指定の場合は同じクライアントで生成
            attribute_policy: 属性取得が失敗したときのポリシー
        """
        self.client = client
        self.resolver = resolver or AttributeResolver(client)
        self.attribute_policy = JoinPolicy(attribute_policy)

    async def fetch_description(self, entity_uri: str) -> Dict[str, str]:
        """説明クエリの1行目を取得（結果がなければ空の辞書）"""
        rows = await self.client.execute(build_description_query(entity_uri))
        if not rows:
            logger.info(f"No descriptive data for {entity_uri}")
            return {}
        return rows[0]

    async def fetch_attributes(self, entity_uri: str) -> Dict[AttributeKind, List[AttributeValue]]:
        """8種類の属性を並列に取得"""
        kinds = list(AttributeKind)
        results = await join_all(
            [self.resolver.resolve(entity_uri, kind) for kind in kinds],
            policy=self.attribute_policy,
            fallback=list,
            names=[f"{kind.value} of {entity_uri}" for kind in kinds],
        )
        return dict(zip(kinds, results))

    async def assemble(self, entity_uri: str) -> Manga:
        """
        マンガURIからMangaレコードを組み立てる

        Args:
            entity_uri: マンガのURI（<...> 形式も可）

        Returns:
            Manga
        """
        description = await self.fetch_description(entity_uri)
        attributes = await self.fetch_attributes(entity_uri)
        return self.build_record(entity_uri, description, attributes)

    def build_record(
        self,
        entity_uri: str,
        description: Dict[str, str],
        attributes: Dict[AttributeKind, List[AttributeValue]],
    ) -> Manga:
        """説明クエリと属性クエリの結果をMangaにまとめる"""
        fields: Dict[str, Any] = {}

        for name in TEXT_FIELDS:
            if description.get(name):
                fields[name] = description[name]

        if "titleEnglish" in fields:
            fields["titleEnglish"] = strip_suffix(fields["titleEnglish"], MANGA_TITLE_SUFFIX)

        # 値のある属性だけを複数形のフィールド名で追加
        for kind, values in attributes.items():
            if not values:
                continue
            labels = [value.label for value in values]
            if kind == AttributeKind.GENRE:
                labels = [strip_suffix(label, GENRE_SUFFIX) for label in labels]
            fields[kind.field_name] = labels

        fields["firstPublicationDate"] = parse_publication_date(description.get("firstPublicationDate"))
        fields["lastPublicationDate"] = parse_publication_date(description.get("lastPublicationDate"))
        fields["numberOfVolumes"] = parse_volume_count(description.get("numberOfVolumes"))

        return Manga(
            **fields,
            source=DATA_SOURCE,
            sourceURL=strip_angle_brackets(entity_uri),
        )

