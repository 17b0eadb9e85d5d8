"""
検索APIルーター

/api/search と /api/autocomplete エンドポイントを提供します。
"""

import httpx
from fastapi import APIRouter, HTTPException, Query

from backend.models.schemas import AutocompleteResponse, SearchMeta, SearchMode, SearchResponse
from backend.services.search_service import manga_search_service
from backend.services.sparql_client import SPARQLError


router = APIRouter(tags=["search"])


@router.get("/search", response_model=SearchResponse, response_model_exclude_none=True)
async def search_manga(
    mode: SearchMode = Query(
        default=SearchMode.BY_NAME,
        description="検索モード (byName, byAuthor, byGenre)",
    ),
    q: str = Query(
        min_length=1,
        description="検索文字列（タイトル、作者名、ジャンル）",
    ),
):
    """
    マンガを検索

    DBpediaから候補を取得し、正規化したMangaレコードのリストを返します。
    """
    try:
        results = await manga_search_service.search(mode, q)
    except (httpx.HTTPError, SPARQLError) as e:
        raise HTTPException(
            status_code=502,
            detail=f"Failed to search DBpedia: {str(e)}",
        )

    return SearchResponse(
        results=results,
        meta=SearchMeta(mode=mode, query=q, count=len(results)),
    )


@router.get("/autocomplete", response_model=AutocompleteResponse)
async def autocomplete(
    mode: SearchMode = Query(
        default=SearchMode.BY_NAME,
        description="検索モード (byName, byAuthor, byGenre)",
    ),
):
    """検索モードに応じたオートコンプリート候補を取得"""
    try:
        labels = await manga_search_service.autocomplete(mode)
    except (httpx.HTTPError, SPARQLError) as e:
        raise HTTPException(
            status_code=502,
            detail=f"Failed to fetch autocomplete labels: {str(e)}",
        )

    return AutocompleteResponse(mode=mode, labels=labels)
