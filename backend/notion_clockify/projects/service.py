# backend/notion_clockify/projects/service.py

"""
プロジェクト Webhook の同期ロジック。

- 未登録の Notion プロジェクト → Clockify にプロジェクトを作成（または既存を流用）して対応表に保存
- 登録済みで名前・絵文字が変わった → Clockify 側の名前を更新して対応表も更新
"""

import logging
from dataclasses import dataclass

from notion_clockify.clockify.client import ClockifyClient
from notion_clockify.notion.schemas import ProjectEvent

from .repository import ProjectMappingStore
from .schemas import ProjectRecord

logger = logging.getLogger(__name__)


@dataclass
class ProjectSyncResult:
    notion_id: str
    name: str
    clockify_id: str
    created: bool
    updated: bool


class ProjectSyncService:
    """
    ProjectEvent を受け取り、Clockify と対応表を同期するサービス。

    Clockify 作成後に対応表の保存が失敗した場合の補償処理は行わない。
    作成されたプロジェクトの名前は表示名で Notion ID を含まないため、
    次回の Webhook では部分一致せず、Clockify 側に重複プロジェクトが作られる。
    """

    def __init__(self, client: ClockifyClient, store: ProjectMappingStore) -> None:
        self._client = client
        self._store = store

    def handle_project_event(self, event: ProjectEvent) -> ProjectSyncResult:
        logger.info("Project webhook: %s (%s)", event.name, event.notion_id)
        if event.emoji:
            logger.debug("Project emoji: %s", event.emoji)
        elif event.has_custom_icon:
            logger.debug("Project has a custom icon.")

        existing = self._store.get(event.notion_id)

        if existing is None:
            project = self._client.find_or_create_project(event.notion_id, event.name)
            self._store.upsert(
                event.notion_id,
                ProjectRecord(
                    clockify_id=project.id,
                    name=event.name,
                    emoji=event.emoji,
                    color=project.color,
                    billable=project.billable,
                    public=project.public,
                ),
            )
            logger.info("Project mapped: %s -> %s", event.notion_id, project.id)
            return ProjectSyncResult(
                notion_id=event.notion_id,
                name=event.name,
                clockify_id=project.id,
                created=True,
                updated=False,
            )

        if existing.name == event.name and existing.emoji == event.emoji:
            logger.info("Project already mapped and unchanged: %s", event.notion_id)
            return ProjectSyncResult(
                notion_id=event.notion_id,
                name=event.name,
                clockify_id=existing.clockify_id,
                created=False,
                updated=False,
            )

        project = self._client.update_project(
            existing.clockify_id,
            event.display_name,
            existing.color,
        )
        self._store.upsert(
            event.notion_id,
            existing.model_copy(update={"name": event.name, "emoji": event.emoji}),
        )
        logger.info(
            "Project renamed in Clockify: %s -> %r", project.id, event.display_name
        )
        return ProjectSyncResult(
            notion_id=event.notion_id,
            name=event.name,
            clockify_id=existing.clockify_id,
            created=False,
            updated=True,
        )
