# backend/notion_clockify/tracking/state.py

"""
実行中タスク（ActiveTrackingEntry）のインメモリ管理。

- Notion タスク ID → 実行中の Clockify time entry 情報
- 永続化しないため、プロセス再起動で失われる
  （Clockify 側の time entry は手動で止めるまで開いたまま残る）
- FastAPI の sync エンドポイントはスレッドプールで動くので、
  判定から更新までを lock で直列化する
"""

from __future__ import annotations

import threading
from typing import Dict, Iterator, List, Optional

from .schemas import ActiveTrackingEntry


class ActiveTaskRegistry:
    """Notion タスク ID をキーにした実行中エントリの集合。"""

    def __init__(self) -> None:
        self._entries: Dict[str, ActiveTrackingEntry] = {}
        self.lock = threading.RLock()

    def get(self, task_id: str) -> Optional[ActiveTrackingEntry]:
        with self.lock:
            return self._entries.get(task_id)

    def add(self, task_id: str, entry: ActiveTrackingEntry) -> None:
        with self.lock:
            self._entries[task_id] = entry

    def remove(self, task_id: str) -> Optional[ActiveTrackingEntry]:
        with self.lock:
            return self._entries.pop(task_id, None)

    def clear(self) -> None:
        with self.lock:
            self._entries.clear()

    def task_ids(self) -> List[str]:
        with self.lock:
            return list(self._entries)

    def __contains__(self, task_id: object) -> bool:
        with self.lock:
            return task_id in self._entries

    def __len__(self) -> int:
        with self.lock:
            return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self.task_ids())


_registry: Optional[ActiveTaskRegistry] = None
_registry_lock = threading.Lock()


def get_active_task_registry() -> ActiveTaskRegistry:
    """
    共有の ActiveTaskRegistry インスタンスを返す。

    初回呼び出し時にのみ生成し、それ以降は同じインスタンスを返す。
    スレッドプールから同時に呼ばれても生成は 1 回だけ。
    """
    global _registry
    if _registry is None:
        with _registry_lock:
            if _registry is None:
                _registry = ActiveTaskRegistry()
    return _registry


def reset_state() -> None:
    """
    テスト用に ActiveTaskRegistry のシングルトン状態をリセットする。
    """
    global _registry
    with _registry_lock:
        _registry = None
