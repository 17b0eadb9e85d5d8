#!/usr/bin/env python3
"""
マンガ検索スクリプト

コマンドラインからDBpediaのマンガを検索し、結果をJSONで出力します。

使用方法:
    uv run python search_manga.py naruto
    uv run python search_manga.py "Eiichiro Oda" --mode byAuthor
    uv run python search_manga.py shōnen --mode byGenre
    uv run python search_manga.py http://dbpedia.org/resource/Naruto --uri
"""

import argparse
import asyncio
import json
import logging
import sys

import httpx

from backend.config import SPARQL_QUERY_ENDPOINT
from backend.logging_config import setup_logging
from backend.models.schemas import SearchMode
from backend.services.query_builder import InvalidEntityURIError
from backend.services.search_service import MangaSearchService
from backend.services.sparql_client import SPARQLClient, SPARQLError


async def run(args) -> list:
    """検索を実行してレコードのリストを返す"""
    service = MangaSearchService(SPARQLClient(query_endpoint=args.endpoint))

    if args.uri:
        manga = await service.search_by_uri(args.query)
        return [manga.to_record()]

    results = await service.search(SearchMode(args.mode), args.query)
    return [manga.to_record() for manga in results]


def main():
    parser = argparse.ArgumentParser(description='DBpediaからマンガを検索')
    parser.add_argument('query', help='検索文字列（--uri指定時はマンガのURI）')
    parser.add_argument('--mode', choices=[m.value for m in SearchMode],
                        default=SearchMode.BY_NAME.value,
                        help='検索モード (default: byName)')
    parser.add_argument('--uri', action='store_true',
                        help='検索せずに指定URIのマンガを取得')
    parser.add_argument('--endpoint', default=SPARQL_QUERY_ENDPOINT,
                        help=f'SPARQLエンドポイント (default: {SPARQL_QUERY_ENDPOINT})')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='詳細ログを出力')
    args = parser.parse_args()

    setup_logging(logging.DEBUG if args.verbose else logging.INFO, stream=sys.stderr)

    try:
        records = asyncio.run(run(args))
    except InvalidEntityURIError as e:
        logging.error(f"不正なURI: {e}")
        sys.exit(2)
    except (httpx.HTTPError, SPARQLError) as e:
        logging.error(f"検索に失敗しました: {e!r}")
        sys.exit(1)

    print(json.dumps(records, ensure_ascii=False, indent=2))
    logging.info(f"{len(records)}件のマンガを取得しました")


if __name__ == "__main__":
    main()
