"""
Clockify 連携モジュール。

- config: Clockify API の設定値（ベース URL, API キー, ワークスペース ID 等）
- schemas: プロジェクト / タスク / time entry の Pydantic モデル
- client: Clockify REST API への HTTP クライアント
"""

from .client import (  # noqa: F401
    ClockifyAPIError,
    ClockifyAuthError,
    ClockifyClient,
    ClockifyClientError,
)
from .config import ClockifyConfig, get_clockify_config  # noqa: F401
