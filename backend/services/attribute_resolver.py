"""
属性リゾルバー

マンガの多値属性（作者、出版社、ジャンルなど）を取得し、
ラベルのない値にはURIから表示ラベルを補完します。
"""

import logging
from typing import List, Union

from backend.models.schemas import AttributeKind, AttributeValue
from backend.services.query_builder import build_attribute_query, is_valid_url
from backend.services.sparql_client import SPARQLClient, sparql_client


logger = logging.getLogger(__name__)


def uri_last_fragment(value: str) -> str:
    """URIの最後のパス要素を取得（URIでなければそのまま返す）"""
    if is_valid_url(value):
        return value.rstrip("/").split("/")[-1]
    return value


def fallback_label(value: str) -> str:
    """ラベルのない値の表示ラベルを生成 (例: .../Weekly_Shōnen_Jump -> "Weekly Shōnen Jump")"""
    return uri_last_fragment(value).replace("_", " ")


class AttributeResolver:
    """マンガの多値属性を取得するクラス"""

    def __init__(self, client: SPARQLClient = sparql_client):
        self.client = client

    async def resolve(
        self, entity_uri: str, kind: Union[AttributeKind, str]
    ) -> List[AttributeValue]:
        """
        指定した種類の属性値を取得

        Args:
            entity_uri: マンガのURI
            kind: 属性の種類 (author, magazine, ...)

        Returns:
            AttributeValueのリスト。未対応の種類なら空リスト
        """
        try:
            kind = AttributeKind(kind)
        except ValueError:
            logger.debug(f"Unsupported attribute kind: {kind!r}")
            return []

        query = build_attribute_query(entity_uri, kind)
        rows = await self.client.execute(query)

        values = []
        for row in rows:
            uri = row.get("uri")
            if uri is None:
                continue
            label = row.get("label") or fallback_label(uri)
            values.append(AttributeValue(uri=uri, label=label))

        logger.debug(f"Resolved {len(values)} {kind.value} values for {entity_uri}")
        return values

