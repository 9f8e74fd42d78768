# backend/notion_clockify/utils/__init__.py
"""
共通ユーティリティ（設定・ロギング・例外・Webhook 認証）。
"""
