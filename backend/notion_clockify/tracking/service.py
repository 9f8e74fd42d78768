# backend/notion_clockify/tracking/service.py

"""
タスク Webhook → Clockify time entry の開始・停止を決めるサービス層。

判定は (Status が in-progress か, そのタスクを計測中か) の組で行う:

- in-progress かつ 未計測       → 開始
- in-progress かつ 計測中       → 何もしない（再送への冪等性）
- それ以外 かつ 計測中（唯一）   → 全 time entry 停止 + 計測中一覧を全消去
- それ以外 かつ 計測中（他にもあり）→ タスク名が一致すればそのエントリだけ停止
- それ以外 かつ 未計測           → 何もしない
"""

import logging
from typing import Optional

from notion_clockify.clockify.client import ClockifyClient
from notion_clockify.notion.schemas import ProjectRelation, TaskEvent
from notion_clockify.projects.repository import ProjectMappingStore
from notion_clockify.projects.schemas import ProjectRecord

from .schemas import ActiveTrackingEntry, ReconciliationResult, TrackingAction
from .state import ActiveTaskRegistry

logger = logging.getLogger(__name__)


class TaskReconciliationService:
    """
    TaskEvent を受け取り、Clockify の time entry と計測中一覧を整合させる。

    一度に計測するタスクは 1 つという運用を前提にしており、
    最後の 1 件が止まるときはユーザーの実行中 time entry をまとめて止める。
    """

    def __init__(
        self,
        client: ClockifyClient,
        store: ProjectMappingStore,
        registry: ActiveTaskRegistry,
    ) -> None:
        self._client = client
        self._store = store
        self._registry = registry

    # ---- 公開 API ------------------------------------------------------

    def reconcile(self, event: TaskEvent) -> ReconciliationResult:
        logger.info("Task: %s", event.label)
        logger.info("Status: %s", event.status_name or "undefined")

        # 判定と更新の間に他リクエストが割り込まないようにする
        with self._registry.lock:
            active = self._registry.get(event.task_id)

            if event.is_in_progress:
                if active is None:
                    return self._start(event)
                logger.debug("Task is already being tracked: %s", active)
                return ReconciliationResult(
                    action=TrackingAction.ALREADY_TRACKING,
                    entry=active,
                    clockify_project_id=active.project_id,
                )

            if active is None:
                return ReconciliationResult(action=TrackingAction.NOT_TRACKING)

            if len(self._registry) == 1:
                return self._stop_all(active)
            return self._stop_one(event, active)

    # ---- 内部: 開始 -----------------------------------------------------

    def _resolve_project(self, relation: Optional[ProjectRelation]) -> Optional[str]:
        """
        タスクの Project リレーションから Clockify プロジェクト ID を求める。

        - リレーション無し → None
        - リレーション先がアイコン → None（プロジェクト無しで計測する）
        - 対応表に無い → Clockify で検索・作成して対応表に保存
        """
        if relation is None:
            return None

        if relation.is_icon:
            # NOTE: Notion 側のデータの癖への回避策と思われる。挙動は既存のまま残す。
            logger.warning(
                "Project relation %s is an icon; tracking without project.", relation.id
            )
            return None

        record = self._store.get(relation.id)
        if record is not None:
            logger.debug("Project found in mapping: %s", record.clockify_id)
            return record.clockify_id

        logger.info("Project %s is not mapped yet; resolving in Clockify.", relation.id)
        project = self._client.find_or_create_project(relation.id)
        self._store.upsert(
            relation.id,
            ProjectRecord(
                clockify_id=project.id,
                name=project.name,
                color=project.color,
                billable=project.billable,
                public=project.public,
            ),
        )
        return project.id

    def _start(self, event: TaskEvent) -> ReconciliationResult:
        project_id = self._resolve_project(event.project)

        clockify_task_id: Optional[str] = None
        if project_id:
            task = self._client.find_or_create_task(event.task_name, project_id)
            clockify_task_id = task.id if task is not None else None

        time_entry = self._client.start_time_entry(
            event.task_id,
            event.task_name,
            project_id,
            event.formatted_id,
        )

        entry = ActiveTrackingEntry(
            time_entry_id=time_entry.id,
            project_id=project_id,
            task_id=clockify_task_id,
            task_name=event.task_name,
        )
        self._registry.add(event.task_id, entry)
        logger.info("Tracking started: %s", event.label)

        return ReconciliationResult(
            action=TrackingAction.STARTED,
            entry=entry,
            clockify_project_id=project_id,
        )

    # ---- 内部: 停止 -----------------------------------------------------

    def _stop_all(self, active: ActiveTrackingEntry) -> ReconciliationResult:
        logger.info("Last active task changed status; stopping all time entries.")
        self._client.stop_all_time_entries()
        self._registry.clear()
        return ReconciliationResult(
            action=TrackingAction.STOPPED_ALL,
            entry=active,
            clockify_project_id=active.project_id,
        )

    def _stop_one(self, event: TaskEvent, active: ActiveTrackingEntry) -> ReconciliationResult:
        # ID ではなく名前で照合する（計測中に名前が変わると止まらない）
        if active.task_name != event.task_name:
            logger.info(
                "Status change does not match the tracked task name (%r != %r); ignoring.",
                event.task_name,
                active.task_name,
            )
            return ReconciliationResult(
                action=TrackingAction.IGNORED,
                entry=active,
                clockify_project_id=active.project_id,
            )

        self._client.stop_time_entry(active.time_entry_id)
        self._registry.remove(event.task_id)
        logger.info("Tracking stopped: %s", event.label)
        return ReconciliationResult(
            action=TrackingAction.STOPPED,
            entry=active,
            clockify_project_id=active.project_id,
        )
