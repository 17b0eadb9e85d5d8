"""
MangaKG バックエンドAPI

FastAPIアプリケーションのエントリポイント
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.config import API_PREFIX, CORS_ORIGINS, SPARQL_QUERY_ENDPOINT
from backend.logging_config import setup_logging
from backend.routers import manga, search


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info(f"MangaKG API Server starting... (endpoint: {SPARQL_QUERY_ENDPOINT})")
    yield
    logger.info("MangaKG API Server shutting down...")


app = FastAPI(
    title="MangaKG API",
    description="DBpediaからマンガ情報を検索・集約するためのAPI",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS設定
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ルーターを登録
app.include_router(search.router, prefix=API_PREFIX)
app.include_router(manga.router, prefix=API_PREFIX)


@app.get("/")
async def root():
    """ルートエンドポイント"""
    return {
        "name": "MangaKG API",
        "version": "0.1.0",
        "docs": "/docs",
        "redoc": "/redoc",
    }


@app.get("/health")
async def health_check():
    from backend.services.sparql_client import sparql_client

    endpoint_ok = await sparql_client.check_connection()

    return {
        "status": "ok" if endpoint_ok else "degraded",
        "sparql": "connected" if endpoint_ok else "disconnected",
        "endpoint": sparql_client.query_endpoint,
    }
