# backend/notion_clockify/main.py

"""
バックエンドアプリケーションのエントリーポイント。

主な責務:
- /project-webhook : Notion プロジェクト → Clockify プロジェクトの同期
- /webhook         : Notion タスクの Status 変更 → Clockify time entry の開始・停止
- /projects        : プロジェクト対応表の一覧・削除
"""

import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import PlainTextResponse

from notion_clockify.projects.database import dispose_engine, init_db
from notion_clockify.projects.router import router as projects_router
from notion_clockify.tracking.router import router as tracking_router
from notion_clockify.utils.log_config import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """起動時にテーブルを作成し、終了時に DB 接続を閉じる。"""
    init_db()
    yield
    dispose_engine()


def create_app() -> FastAPI:
    """
    FastAPI アプリケーションファクトリ。

    - Webhook エンドポイント (/project-webhook, /webhook)
    - プロジェクト対応表エンドポイント (/projects)
    - ヘルスチェックエンドポイント (/health)
    """
    load_dotenv()
    configure_logging()

    app = FastAPI(title="Notion Clockify Bridge", lifespan=lifespan)

    # ルーター登録
    app.include_router(projects_router)
    app.include_router(tracking_router)

    # 5xx は本文をプレーンテキストで返す（4xx は FastAPI 標準の JSON のまま）
    @app.exception_handler(HTTPException)
    async def server_error_handler(request: Request, exc: HTTPException):
        if exc.status_code >= 500:
            return PlainTextResponse(str(exc.detail), status_code=exc.status_code)
        return await http_exception_handler(request, exc)

    @app.get("/health", tags=["health"])
    def health_check() -> dict:
        """
        簡易ヘルスチェックエンドポイント。
        モニタリングや動作確認用。
        """
        return {"status": "ok"}

    return app


# uvicorn 実行時のエントリーポイント
app = create_app()
