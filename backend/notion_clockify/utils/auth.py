# backend/notion_clockify/utils/auth.py

"""
Notion Webhook の共有シークレット検証。

Notion オートメーションは固定のヘッダー値を送るだけなので、
署名検証ではなく単純な文字列比較で判定する。
"""

import logging
from functools import lru_cache
from typing import Optional

from fastapi import Header, HTTPException

from .config import get_env
from .errors import AuthError

logger = logging.getLogger(__name__)


@lru_cache()
def get_webhook_secret() -> str:
    """環境変数 NOTION_WEBHOOK_SECRET を読み込む（必須）。"""
    return get_env("NOTION_WEBHOOK_SECRET")


def check_secret(provided: Optional[str], expected: str) -> None:
    """
    ヘッダー値と設定値を比較し、一致しなければ AuthError を投げる。
    """
    if not provided or provided != expected:
        raise AuthError("Invalid secret")


def verify_webhook_secret(secret: Optional[str] = Header(None)) -> None:
    """
    FastAPI の依存関数。`secret` ヘッダーを検証する。

    - 不一致・未指定 → 401
    """
    try:
        check_secret(secret, get_webhook_secret())
    except AuthError as exc:
        logger.warning("Rejected webhook: %s", exc.message)
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc

    logger.debug("Webhook secret accepted.")
