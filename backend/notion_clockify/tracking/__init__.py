# backend/notion_clockify/tracking/__init__.py

"""
タスクの計測（Clockify time entry の開始・停止）モジュール群。

- schemas: ActiveTrackingEntry / Webhook レスポンスの Pydantic モデル
- state: 計測中タスクの共有インスタンス管理
- service: 開始・停止の判定ロジック本体
- router: /webhook エンドポイント
"""
