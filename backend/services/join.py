"""
並列実行（ファンアウト/ファンイン）ユーティリティ

全ての処理を開始してから待機し、失敗時の扱いは呼び出し側が
JoinPolicy で明示的に選択します。
"""

import asyncio
import logging
from enum import Enum
from typing import Awaitable, Callable, List, Optional, Sequence, TypeVar


logger = logging.getLogger(__name__)

T = TypeVar("T")


class JoinPolicy(str, Enum):
    """並列処理の一部が失敗したときのポリシー"""
    FAIL_FAST = "fail_fast"  # 1つでも失敗したら残りをキャンセルして例外を送出
    DEGRADE = "degrade"      # 失敗した処理はフォールバック値に置き換える


async def join_all(
    awaitables: Sequence[Awaitable[T]],
    policy: JoinPolicy = JoinPolicy.FAIL_FAST,
    fallback: Optional[Callable[[], T]] = None,
    names: Optional[Sequence[str]] = None,
) -> List[T]:
    """
    全ての処理を並列に実行し、入力と同じ順序で結果を返す

    Args:
        awaitables: 実行するコルーチン等
        policy: 失敗時のポリシー
        fallback: DEGRADE時に失敗した処理の代わりに使う値を返す関数
        names: ログ出力用の各処理の名前

    Returns:
        結果のリスト（入力順）
    """
    policy = JoinPolicy(policy)
    tasks = [asyncio.ensure_future(aw) for aw in awaitables]
    if not tasks:
        return []

    if policy == JoinPolicy.FAIL_FAST:
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            for task in tasks:
                if not task.done():
                    task.cancel()
            # キャンセルの完了を待ってから元の例外を送出
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    results = await asyncio.gather(*tasks, return_exceptions=True)
    joined: List[T] = []
    for index, result in enumerate(results):
        if isinstance(result, Exception):
            name = names[index] if names else str(index)
            logger.warning(f"Branch '{name}' failed, using fallback: {result!r}")
            joined.append(fallback() if fallback else None)
        elif isinstance(result, BaseException):
            raise result
        else:
            joined.append(result)
    return joined
