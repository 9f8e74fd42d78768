# backend/notion_clockify/projects/database.py

"""
データベース接続（engine / session）の管理。

- DATABASE_URL から SQLAlchemy engine を生成する
- PostgreSQL はコネクションプール、SQLite（テスト用）は単一接続を使う
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Dict, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from notion_clockify.utils.config import get_env

logger = logging.getLogger(__name__)

# SQLAlchemy モデルの基底クラス
Base = declarative_base()


def _normalize_url(url: str) -> str:
    """
    postgres:// / postgresql:// を psycopg (v3) ドライバ指定に揃える。
    Heroku などは postgres:// 形式で URL を渡してくる。
    """
    if url.startswith("postgres://"):
        url = "postgresql://" + url[len("postgres://"):]
    if url.startswith("postgresql://"):
        url = "postgresql+psycopg://" + url[len("postgresql://"):]
    return url


def _create_engine_args(url: str) -> Dict[str, Any]:
    """
    DB の種類に応じて engine の引数を組み立てる。
    """
    args: Dict[str, Any] = {"future": True}

    if url.startswith("sqlite"):
        args["connect_args"] = {"check_same_thread": False}
        # インメモリ DB はコネクションごとに別物になるので 1 接続を共有する
        if url in ("sqlite://", "sqlite:///:memory:") or "mode=memory" in url:
            args["poolclass"] = StaticPool
    else:
        args["pool_pre_ping"] = True

    return args


def build_engine(url: Optional[str] = None) -> Engine:
    """DATABASE_URL（または引数の URL）から engine を生成する。"""
    url = _normalize_url(url or get_env("DATABASE_URL"))
    engine = create_engine(url, **_create_engine_args(url))
    logger.debug("Database engine created for dialect %s", engine.dialect.name)
    return engine


@lru_cache()
def get_engine() -> Engine:
    """アプリ全体で共有する engine。"""
    return build_engine()


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def init_db(engine: Optional[Engine] = None) -> None:
    """テーブルが無ければ作成する。"""
    # モデルを Base.metadata に登録するための import
    from . import models  # noqa: F401

    engine = engine or get_engine()
    Base.metadata.create_all(engine)
    logger.info("Database initialized (%s).", engine.dialect.name)


def dispose_engine() -> None:
    """共有 engine の接続を閉じ、キャッシュを破棄する。"""
    if get_engine.cache_info().currsize:
        get_engine().dispose()
    get_engine.cache_clear()
