"""
サービスモジュール
"""

from .sparql_client import sparql_client
from .search_service import manga_search_service

__all__ = ["sparql_client", "manga_search_service"]
