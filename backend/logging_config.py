"""
ログ設定モジュール
"""

import logging
import sys
from typing import Optional, TextIO, Union

from backend.config import LOG_LEVEL


def setup_logging(level: Union[str, int] = LOG_LEVEL, stream: Optional[TextIO] = None):
    """ログ設定を初期化"""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logging.basicConfig(
        level=level,
        format='[%(asctime)s] %(levelname)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        handlers=[logging.StreamHandler(stream or sys.stdout)],
    )
    # httpxのリクエストログは冗長なので抑制
    logging.getLogger("httpx").setLevel(logging.WARNING)
