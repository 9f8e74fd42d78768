# backend/notion_clockify/projects/repository.py

"""
Notion プロジェクト ID → Clockify プロジェクトの対応表（projects テーブル）のリポジトリ。

- notion_id の一意制約に対する upsert（INSERT ... ON CONFLICT DO UPDATE）
- DB エラーはリトライせず ProjectStoreError（UpstreamError）として伝える
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Dict, Iterator, List, Mapping, Optional

from sqlalchemy import func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from notion_clockify.utils.errors import UpstreamError

from .database import make_session_factory
from .models import ProjectModel
from .schemas import ProjectRecord, ProjectSummary

logger = logging.getLogger(__name__)

_INSERT_BY_DIALECT = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class ProjectStoreError(UpstreamError):
    """projects テーブルへのアクセスに失敗した場合の例外。"""


def _to_record(row: ProjectModel) -> ProjectRecord:
    return ProjectRecord(
        clockify_id=row.clockify_id,
        name=row.name,
        emoji=row.emoji,
        color=row.color,
        billable=row.billable,
        public=row.public,
    )


def _to_summary(row: ProjectModel) -> ProjectSummary:
    return ProjectSummary(
        id=row.id,
        notion_id=row.notion_id,
        name=row.name,
        clockify_id=row.clockify_id,
        emoji=row.emoji,
    )


class ProjectMappingStore:
    """
    projects テーブルを扱うリポジトリ。

    1 メソッド = 1 トランザクション。upsert_many のみ複数行を 1 トランザクションで扱う。
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        self._session_factory = make_session_factory(engine)

        insert = _INSERT_BY_DIALECT.get(engine.dialect.name)
        if insert is None:
            raise ProjectStoreError(
                f"Unsupported database dialect for upsert: {engine.dialect.name}"
            )
        self._insert = insert

    @contextmanager
    def _transaction(self) -> Iterator[Session]:
        """コミット / ロールバックを行い、DB エラーを ProjectStoreError に変換する。"""
        try:
            with self._session_factory.begin() as session:
                yield session
        except SQLAlchemyError as exc:
            logger.error("Project store error: %s", exc)
            raise ProjectStoreError(f"Database error: {exc}") from exc

    def _upsert(self, session: Session, notion_id: str, record: ProjectRecord) -> None:
        values = {"notion_id": notion_id, **record.model_dump()}
        stmt = self._insert(ProjectModel).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[ProjectModel.notion_id],
            set_={
                "clockify_id": stmt.excluded.clockify_id,
                "name": stmt.excluded.name,
                "emoji": stmt.excluded.emoji,
                "color": stmt.excluded.color,
                "billable": stmt.excluded.billable,
                "public": stmt.excluded.public,
                "updated_at": func.now(),
            },
        )
        session.execute(stmt)

    # ---- 公開 API ------------------------------------------------------

    def load(self) -> Dict[str, ProjectRecord]:
        """全行を notion_id → ProjectRecord の辞書として返す。"""
        with self._transaction() as session:
            rows = session.scalars(select(ProjectModel).order_by(ProjectModel.id)).all()
            return {row.notion_id: _to_record(row) for row in rows}

    def get(self, notion_id: str) -> Optional[ProjectRecord]:
        """notion_id に対応する行を 1 件返す。無ければ None。"""
        with self._transaction() as session:
            row = session.scalars(
                select(ProjectModel).where(ProjectModel.notion_id == notion_id)
            ).one_or_none()
            return _to_record(row) if row is not None else None

    def upsert(self, notion_id: str, record: ProjectRecord) -> None:
        """
        1 行を upsert する。既存行があれば全フィールドを上書きし updated_at を更新する。
        """
        with self._transaction() as session:
            self._upsert(session, notion_id, record)
        logger.debug("Project mapping saved: %s -> %s", notion_id, record.clockify_id)

    def upsert_many(self, mapping: Mapping[str, ProjectRecord]) -> None:
        """
        複数行を 1 トランザクションで upsert する。途中で失敗した場合は全件ロールバック。

        対応表の一括保存（旧来の保存経路）用。Webhook 処理は 1 件ずつ upsert を使うため、
        アプリ内からは呼ばれていない。
        """
        with self._transaction() as session:
            for notion_id, record in mapping.items():
                self._upsert(session, notion_id, record)
        logger.debug("Project mappings saved: %d rows", len(mapping))

    def list_all(self) -> List[ProjectSummary]:
        """行 ID 順に全プロジェクトを返す。"""
        with self._transaction() as session:
            rows = session.scalars(select(ProjectModel).order_by(ProjectModel.id)).all()
            return [_to_summary(row) for row in rows]

    def delete_by_id(self, row_id: int) -> Optional[ProjectSummary]:
        """
        行 ID を指定して削除する。

        :return: 削除した行。存在しない場合は None
        """
        with self._transaction() as session:
            row = session.get(ProjectModel, row_id)
            if row is None:
                return None
            summary = _to_summary(row)
            session.delete(row)
        logger.info("Project mapping deleted: id=%s notion_id=%s", summary.id, summary.notion_id)
        return summary
