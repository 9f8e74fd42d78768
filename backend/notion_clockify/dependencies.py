# backend/notion_clockify/dependencies.py

"""
ルーター間で共有する FastAPI の依存プロバイダ。

テスト時は app.dependency_overrides で差し替える。
"""

from functools import lru_cache

from notion_clockify.clockify.client import ClockifyClient
from notion_clockify.projects.database import get_engine
from notion_clockify.projects.repository import ProjectMappingStore


@lru_cache()
def get_project_store() -> ProjectMappingStore:
    """共有 engine に紐づく ProjectMappingStore のシングルトン。"""
    return ProjectMappingStore(get_engine())


@lru_cache()
def get_clockify_client() -> ClockifyClient:
    """環境変数の設定で初期化した ClockifyClient のシングルトン。"""
    return ClockifyClient()


def reset_dependencies() -> None:
    """テスト用にキャッシュ済みインスタンスを破棄する。"""
    get_project_store.cache_clear()
    get_clockify_client.cache_clear()
