#!/usr/bin/env python3
"""
MangaKG サーバー起動スクリプト

使用方法:
    python run_server.py
    python run_server.py --port 8000 --reload --log-level debug
"""

import argparse
import logging

import uvicorn

from backend.config import LOG_LEVEL
from backend.logging_config import setup_logging


logger = logging.getLogger("run_server")


def main():
    parser = argparse.ArgumentParser(description="MangaKG APIサーバーを起動")
    parser.add_argument("--host", default="0.0.0.0", help="ホストアドレス (デフォルト: 0.0.0.0)")
    parser.add_argument("--port", type=int, default=8000, help="ポート番号 (デフォルト: 8000)")
    parser.add_argument("--reload", action="store_true", help="開発モード（自動リロード有効）")
    parser.add_argument(
        "--log-level",
        default=LOG_LEVEL.lower(),
        choices=["critical", "error", "warning", "info", "debug"],
        help="ログレベル (デフォルト: 環境変数 LOG_LEVEL)",
    )
    args = parser.parse_args()

    setup_logging(args.log_level)
    logger.info(f"Starting MangaKG API on {args.host}:{args.port} (docs: /docs)")

    uvicorn.run(
        "backend.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=args.log_level,
    )


if __name__ == "__main__":
    main()
