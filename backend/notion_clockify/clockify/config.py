# backend/notion_clockify/clockify/config.py

"""
Clockify 連携に必要な設定値をまとめるモジュール。
"""

from dataclasses import dataclass
from functools import lru_cache

from notion_clockify.utils.config import get_env, get_env_int


@dataclass(frozen=True)
class ClockifyConfig:
    """Clockify API 用の設定値コンテナ。"""

    api_key: str
    workspace_id: str
    api_base_url: str = "https://api.clockify.me/api/v1"
    timeout_seconds: int = 10


@lru_cache()
def get_clockify_config() -> ClockifyConfig:
    """
    環境変数から Clockify 設定を読み込む。

    必須:
      - CLOCKIFY_API_KEY
      - CLOCKIFY_WORKSPACE_ID

    任意:
      - CLOCKIFY_API_BASE_URL    (デフォルト: https://api.clockify.me/api/v1)
      - CLOCKIFY_TIMEOUT_SECONDS (デフォルト: 10)
    """
    api_key = get_env("CLOCKIFY_API_KEY")
    workspace_id = get_env("CLOCKIFY_WORKSPACE_ID")

    api_base_url = get_env(
        "CLOCKIFY_API_BASE_URL",
        default="https://api.clockify.me/api/v1",
        required=False,
    )
    timeout_seconds = get_env_int("CLOCKIFY_TIMEOUT_SECONDS", default=10)

    return ClockifyConfig(
        api_key=api_key,
        workspace_id=workspace_id,
        api_base_url=api_base_url.rstrip("/"),
        timeout_seconds=timeout_seconds,
    )
