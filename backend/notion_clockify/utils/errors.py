# backend/notion_clockify/utils/errors.py

"""
アプリケーション共通の例外階層。

各ルーターはエンドポイントの境界でこれらを捕捉し、
status_code に対応する HTTPException に変換する。
"""

from fastapi import status


class RelayError(Exception):
    """Notion → Clockify 連携処理の基底例外。"""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class AuthError(RelayError):
    """Webhook の共有シークレットが不正・未指定の場合の例外。"""

    status_code = status.HTTP_401_UNAUTHORIZED


class MalformedPayloadError(RelayError):
    """Webhook ペイロードに必要なフィールドが存在しない場合の例外。"""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(RelayError):
    """削除・参照対象のレコードが存在しない場合の例外。"""

    status_code = status.HTTP_404_NOT_FOUND


class UpstreamError(RelayError):
    """Clockify API やデータベースなど、外部依存の失敗。リトライはしない。"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
