"""
プロジェクト対応表モジュール。

- database: engine / session の管理
- models: projects テーブルの ORM モデル
- repository: 対応表の読み書き（upsert / 一覧 / 削除）
- service: プロジェクト Webhook の同期ロジック
- router: /project-webhook, /projects エンドポイント
"""
