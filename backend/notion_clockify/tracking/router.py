# backend/notion_clockify/tracking/router.py

"""
タスク Webhook 用の FastAPI ルーター定義。

- POST /webhook
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from notion_clockify.clockify.client import ClockifyClient
from notion_clockify.dependencies import get_clockify_client, get_project_store
from notion_clockify.notion.parsers import parse_task_event
from notion_clockify.notion.schemas import NotionWebhookEnvelope
from notion_clockify.projects.repository import ProjectMappingStore
from notion_clockify.utils.auth import verify_webhook_secret
from notion_clockify.utils.errors import RelayError

from .schemas import TaskWebhookResponse
from .service import TaskReconciliationService
from .state import ActiveTaskRegistry, get_active_task_registry

logger = logging.getLogger(__name__)

router = APIRouter(tags=["tracking"])


def get_reconciliation_service(
    client: ClockifyClient = Depends(get_clockify_client),
    store: ProjectMappingStore = Depends(get_project_store),
    registry: ActiveTaskRegistry = Depends(get_active_task_registry),
) -> TaskReconciliationService:
    return TaskReconciliationService(client=client, store=store, registry=registry)


@router.post(
    "/webhook",
    response_model=TaskWebhookResponse,
    dependencies=[Depends(verify_webhook_secret)],
    summary="Notion タスクの Status 変更に応じて Clockify の計測を開始・停止",
)
def task_webhook(
    body: NotionWebhookEnvelope,
    service: TaskReconciliationService = Depends(get_reconciliation_service),
) -> TaskWebhookResponse:
    """
    Notion タスクページの Webhook を受け取り、time entry を開始・停止する。

    - ペイロード不正 → 400
    - Clockify / DB エラー → 500（リトライはしない）
    """
    logger.debug("Task webhook payload: %s", body.data)
    try:
        event = parse_task_event(body.data)
        result = service.reconcile(event)
    except RelayError as exc:
        logger.error("Error processing webhook: %s", exc.message)
        raise HTTPException(
            status_code=exc.status_code,
            detail=f"Error processing webhook: {exc.message}",
        ) from exc
    except Exception as exc:  # noqa: BLE001
        logger.exception("Unexpected error while processing task webhook")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error processing webhook: {exc}",
        ) from exc

    return TaskWebhookResponse(
        message="Task webhook processed successfully",
        action=result.action,
        task_id=event.task_id,
        task_name=event.task_name,
        project_id=event.project.id if event.project else None,
        is_project_icon=bool(event.project and event.project.is_icon),
        clockify_project_id=result.clockify_project_id,
    )
