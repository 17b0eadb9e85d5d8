"""
Pydanticスキーマ定義

マンガレコードとAPIのリクエスト/レスポンスモデルを定義します。
"""

from typing import Optional, List
from datetime import date
from enum import Enum
from pydantic import BaseModel, Field, field_validator


class SearchMode(str, Enum):
    """検索モード"""
    BY_NAME = "byName"
    BY_AUTHOR = "byAuthor"
    BY_GENRE = "byGenre"


class AttributeKind(str, Enum):
    """マンガの多値属性の種類"""
    AUTHOR = "author"
    MAGAZINE = "magazine"
    PUBLISHER = "publisher"
    DIRECTOR = "director"
    PRODUCER = "producer"
    STUDIO = "studio"
    DEMOGRAPHIC = "demographic"
    GENRE = "genre"

    @property
    def field_name(self) -> str:
        """Mangaレコード上のフィールド名（複数形）"""
        return f"{self.value}s"

    @property
    def predicate(self) -> str:
        """DBpediaの述語（author/magazine/publisherはオントロジー、それ以外はプロパティ）"""
        if self in (AttributeKind.AUTHOR, AttributeKind.MAGAZINE, AttributeKind.PUBLISHER):
            return f"dbo:{self.value}"
        return f"dbp:{self.value}"


class AttributeValue(BaseModel):
    """属性値（URIまたはリテラルとその表示ラベル）"""
    uri: str
    label: str


class Manga(BaseModel):
    """
    マンガレコード

    値が見つからなかった属性はNoneのままにし、シリアライズ時に省略します。
    """
    titleEnglish: Optional[str] = None
    titleRomaji: Optional[str] = None
    titleKanji: Optional[str] = None
    description: Optional[str] = None
    authors: Optional[List[str]] = None
    magazines: Optional[List[str]] = None
    publishers: Optional[List[str]] = None
    directors: Optional[List[str]] = None
    producers: Optional[List[str]] = None
    studios: Optional[List[str]] = None
    demographics: Optional[List[str]] = None
    genres: Optional[List[str]] = None
    firstPublicationDate: Optional[date] = None
    lastPublicationDate: Optional[date] = None
    numberOfVolumes: Optional[int] = None
    source: str
    sourceURL: str

    @field_validator(
        "authors",
        "magazines",
        "publishers",
        "directors",
        "producers",
        "studios",
        "demographics",
        "genres",
    )
    @classmethod
    def empty_list_to_none(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        # 空リストはフィールドごと省略する
        if not value:
            return None
        return value

    def to_record(self) -> dict:
        """値のあるフィールドだけを含むJSON互換の辞書を返す"""
        return self.model_dump(mode="json", exclude_none=True)


class SearchMeta(BaseModel):
    """検索メタ情報"""
    mode: SearchMode
    query: str
    count: int


class SearchResponse(BaseModel):
    """検索レスポンス"""
    results: List[Manga] = Field(default_factory=list)
    meta: SearchMeta


class AutocompleteResponse(BaseModel):
    """オートコンプリート候補レスポンス"""
    mode: SearchMode
    labels: List[str] = Field(default_factory=list)
