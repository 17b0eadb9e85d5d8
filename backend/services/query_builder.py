"""
SPARQLクエリビルダー

DBpediaに発行するSPARQLクエリを組み立てる純粋関数群です。
I/Oは行いません。
"""

from typing import Dict
from urllib.parse import urlparse

from rdflib import Literal, URIRef

from backend.config import MAX_RESULTS_LENGTH, AUTOCOMPLETE_LIMIT
from backend.models.schemas import AttributeKind, SearchMode


PREFIXES = """
PREFIX rdf: <http://www.w3.org/1999/02/22-rdf-syntax-ns#>
PREFIX rdfs: <http://www.w3.org/2000/01/rdf-schema#>
PREFIX dbo: <http://dbpedia.org/ontology/>
PREFIX dbp: <http://dbpedia.org/property/>
"""

# ローマ字の長音記号（マクロン）と置換先
MACRON_VOWELS: Dict[str, str] = {
    "ā": "a",
    "ē": "e",
    "ī": "i",
    "ō": "o",
    "ū": "u",
}

_MACRON_TABLE = str.maketrans(MACRON_VOWELS)

# XPath正規表現のメタ文字
_REGEX_METACHARACTERS = set("\\.?*+()[]{}|^$")

MANGA_TITLE_SUFFIX = " (manga)"


class InvalidEntityURIError(ValueError):
    """IRIとして扱えないエンティティ識別子"""


def sanitize_name(text: str) -> str:
    """
    検索文字列を正規化（小文字化とマクロン除去）

    例: "Ōoku" -> "ooku"
    """
    return text.lower().translate(_MACRON_TABLE)


def sanitize_sparql_name(expression: str) -> str:
    """
    sanitize_name と同じ正規化をSPARQL側で行う式を生成

    Args:
        expression: 正規化対象のSPARQL式 (例: "str(?label)")
    """
    sparql = f"lcase({expression})"
    for macron, plain in MACRON_VOWELS.items():
        sparql = f"replace({sparql},'{macron}','{plain}')"
    return sparql


def escape_regex(text: str) -> str:
    """正規表現のメタ文字をエスケープ"""
    return "".join(f"\\{c}" if c in _REGEX_METACHARACTERS else c for c in text)


def regex_pattern(sanitized_input: str) -> str:
    """ユーザー入力をregex()に渡すSPARQL文字列リテラルに変換"""
    return Literal(escape_regex(sanitized_input.strip())).n3()


def strip_angle_brackets(uri: str) -> str:
    """<...> 形式のURIから山括弧を除去"""
    uri = uri.strip()
    if uri.startswith("<") and uri.endswith(">"):
        return uri[1:-1]
    return uri


def is_valid_url(value: str) -> bool:
    """スキームとホストを持つ絶対URLかどうか"""
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    return bool(parsed.scheme and parsed.netloc)


def format_uri(uri: str) -> str:
    """
    エンティティURIをSPARQLのIRI表記 (<...>) に変換

    Raises:
        InvalidEntityURIError: IRIとして不正な場合
    """
    value = strip_angle_brackets(uri)
    try:
        scheme = urlparse(value).scheme
    except ValueError as e:
        raise InvalidEntityURIError(f"Invalid URI: {uri!r}") from e
    if not scheme:
        raise InvalidEntityURIError(f"Not an absolute URI: {uri!r}")
    try:
        return URIRef(value).n3()
    except Exception as e:
        # rdflibは不正なIRIのシリアライズ時に汎用例外を送出する
        raise InvalidEntityURIError(f"Invalid URI: {uri!r}") from e


def build_discovery_query(
    mode: SearchMode,
    sanitized_input: str,
    limit: int = MAX_RESULTS_LENGTH,
) -> str:
    """
    検索モードに応じて候補マンガURIを取得するクエリを生成

    Args:
        mode: 検索モード (byName, byAuthor, byGenre)
        sanitized_input: sanitize_name 済みの検索文字列
        limit: 最大取得件数
    """
    mode = SearchMode(mode)
    pattern = regex_pattern(sanitized_input)

    if mode == SearchMode.BY_NAME:
        where = f"""
            ?manga rdf:type dbo:Manga ;
                   rdfs:label ?manga_label .
            FILTER(lang(?manga_label) = 'en')
            BIND(IF(contains(lcase(str(?manga_label)), '{MANGA_TITLE_SUFFIX}'),
                    strbefore(str(?manga_label), '{MANGA_TITLE_SUFFIX}'),
                    str(?manga_label)) AS ?manga_name)
            FILTER(regex({sanitize_sparql_name("str(?manga_name)")}, {pattern}))
        """
    elif mode == SearchMode.BY_AUTHOR:
        where = f"""
            ?author_uri rdfs:label ?author_label .
            ?manga dbo:author ?author_uri .
            ?manga rdf:type dbo:Manga .
            FILTER(regex({sanitize_sparql_name("str(?author_label)")}, {pattern}))
        """
    else:
        # ジャンルはラベル付きリソースとリテラルが混在するため3通りを結合
        where = f"""
            {{
                ?manga dbp:genre ?genre .
                ?manga rdf:type dbo:Manga .
                ?genre rdfs:label ?genre_label .
                FILTER(regex({sanitize_sparql_name("str(?genre_label)")}, {pattern}))
            }}
            UNION
            {{
                ?manga dbp:genre ?genre .
                ?manga rdf:type dbo:Manga .
                FILTER(isLiteral(?genre) && regex({sanitize_sparql_name("str(?genre)")}, {pattern}))
            }}
            UNION
            {{
                ?manga dbp:demographic ?genre .
                ?manga rdf:type dbo:Manga .
                FILTER(regex({sanitize_sparql_name("str(?genre)")}, {pattern}))
            }}
        """

    return f"""{PREFIXES}
        SELECT DISTINCT ?manga
        WHERE {{
            {where.strip()}
        }}
        LIMIT {int(limit)}
        """


def build_description_query(entity_uri: str) -> str:
    """
    マンガの単一値属性（タイトル、説明、巻数、刊行日）を取得するクエリを生成

    各属性は独立したOPTIONALなので、ある属性の欠落が他を抑制しない。
    """
    uri = format_uri(entity_uri)
    return f"""{PREFIXES}
        SELECT *
        WHERE {{
            OPTIONAL {{ {uri} rdfs:label ?titleEnglish . FILTER(lang(?titleEnglish) = 'en') }}
            OPTIONAL {{ {uri} dbp:jaRomaji ?titleRomaji . }}
            OPTIONAL {{ {uri} dbp:jaKanji ?titleKanji . }}
            OPTIONAL {{ {uri} dbo:abstract ?description . FILTER(lang(?description) = 'en') }}
            OPTIONAL {{ {uri} dbo:numberOfVolumes ?numberOfVolumes . }}
            OPTIONAL {{ {uri} dbo:firstPublicationDate ?firstPublicationDate . }}
            OPTIONAL {{ {uri} dbp:last ?lastPublicationDate . }}
        }}
        LIMIT 1
        """


def build_attribute_query(entity_uri: str, kind: AttributeKind) -> str:
    """属性の全値と、あれば英語ラベルを取得するクエリを生成"""
    uri = format_uri(entity_uri)
    kind = AttributeKind(kind)
    return f"""{PREFIXES}
        SELECT DISTINCT ?uri ?label
        WHERE {{
            {uri} {kind.predicate} ?uri .
            OPTIONAL {{
                ?uri rdfs:label ?label .
                FILTER(lang(?label) = 'en')
            }}
        }}
        """


def build_autocomplete_query(mode: SearchMode, limit: int = AUTOCOMPLETE_LIMIT) -> str:
    """
    オートコンプリート用の表示ラベル一覧を取得するクエリを生成

    末尾の括弧書き (例: " (manga)") は除去する。
    """
    mode = SearchMode(mode)

    if mode == SearchMode.BY_NAME:
        where = """
            ?manga rdf:type dbo:Manga ;
                   rdfs:label ?label0 .
        """
    elif mode == SearchMode.BY_AUTHOR:
        where = """
            ?author_uri rdfs:label ?label0 .
            ?manga dbo:author ?author_uri .
            ?manga rdf:type dbo:Manga .
        """
    else:
        where = """
            {
                ?manga dbp:genre ?genre .
                ?manga rdf:type dbo:Manga .
                ?genre rdfs:label ?label0 .
            }
            UNION
            {
                ?manga dbp:genre ?label0 .
                ?manga rdf:type dbo:Manga .
                FILTER(isLiteral(?label0))
            }
            UNION
            {
                ?manga dbp:demographic ?demo .
                ?manga rdf:type dbo:Manga .
                ?demo rdfs:label ?label0 .
            }
        """

    return f"""{PREFIXES}
        SELECT DISTINCT ?label
        WHERE {{
            {where.strip()}
            FILTER(lang(?label0) = 'en')
            BIND(IF(contains(str(?label0), ' ('),
                    strbefore(str(?label0), ' ('),
                    str(?label0)) AS ?label)
        }}
        LIMIT {int(limit)}
        """
