# backend/notion_clockify/notion/__init__.py

"""
Notion Webhook ペイロードの読み取りモジュール群。

主な責務:
- Notion オートメーションが送るページオブジェクトを防御的に解析する
- プロジェクト / タスクのイベントモデルに変換する
"""
