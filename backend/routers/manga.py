"""
マンガAPIルーター

/api/manga エンドポイントを提供します。
"""

import httpx
from fastapi import APIRouter, HTTPException, Query

from backend.models.schemas import Manga
from backend.services.query_builder import InvalidEntityURIError
from backend.services.search_service import manga_search_service
from backend.services.sparql_client import SPARQLError


router = APIRouter(prefix="/manga", tags=["manga"])


@router.get("", response_model=Manga, response_model_exclude_none=True)
async def get_manga(
    uri: str = Query(
        min_length=1,
        description="マンガのURI (例: http://dbpedia.org/resource/Naruto)",
    ),
):
    """
    既知のマンガURIからMangaレコードを取得
    """
    try:
        return await manga_search_service.search_by_uri(uri)
    except InvalidEntityURIError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except (httpx.HTTPError, SPARQLError) as e:
        raise HTTPException(
            status_code=502,
            detail=f"Failed to fetch manga: {str(e)}",
        )
