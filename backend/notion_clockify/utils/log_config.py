# backend/notion_clockify/utils/log_config.py

"""
ロギング設定。

各モジュールは logging.getLogger(__name__) を使い、
ここではルートロガーのレベルとフォーマットだけを決める。
"""

import logging

from .config import get_env_bool

_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(verbose: bool | None = None) -> None:
    """
    ルートロガーを設定する。

    :param verbose: True なら DEBUG（ペイロードのダンプも出る）。
                    None の場合は環境変数 VERBOSE を参照する。
    """
    if verbose is None:
        verbose = get_env_bool("VERBOSE", default=False)

    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format=_LOG_FORMAT)
    logging.getLogger().setLevel(level)

    # httpx のリクエストログは VERBOSE 時のみ
    logging.getLogger("httpx").setLevel(logging.INFO if verbose else logging.WARNING)
