"""
バックエンド設定モジュール

環境変数やデフォルト設定を管理します。
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# プロジェクトルート
PROJECT_ROOT = Path(__file__).parent.parent

# .envファイルを読み込み
load_dotenv(PROJECT_ROOT / ".env")

# SPARQLエンドポイント（DBpedia公開エンドポイント）
SPARQL_QUERY_ENDPOINT = os.getenv("DBPEDIA_SPARQL_ENDPOINT", "https://dbpedia.org/sparql")
SPARQL_TIMEOUT = float(os.getenv("SPARQL_TIMEOUT", "30.0"))

# データ提供元
DATA_SOURCE = "DBPedia"

# 1回の検索で取得するマンガの最大件数
MAX_RESULTS_LENGTH = int(os.getenv("MAX_RESULTS_LENGTH", "9"))

# オートコンプリート候補の最大件数
AUTOCOMPLETE_LIMIT = int(os.getenv("AUTOCOMPLETE_LIMIT", "10000"))

# 並列取得の失敗時ポリシー (fail_fast / degrade)
ATTRIBUTE_JOIN_POLICY = os.getenv("ATTRIBUTE_JOIN_POLICY", "degrade")
SEARCH_JOIN_POLICY = os.getenv("SEARCH_JOIN_POLICY", "fail_fast")

# ログ設定
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# API設定
API_PREFIX = "/api"

# CORS設定
CORS_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:8000",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:8000",
]
