# backend/notion_clockify/projects/router.py

"""
プロジェクト関連の FastAPI ルーター定義。

- POST   /project-webhook
- GET    /projects
- DELETE /projects/{project_id}
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from notion_clockify.clockify.client import ClockifyClient
from notion_clockify.dependencies import get_clockify_client, get_project_store
from notion_clockify.notion.parsers import parse_project_event
from notion_clockify.notion.schemas import NotionWebhookEnvelope
from notion_clockify.utils.auth import verify_webhook_secret
from notion_clockify.utils.errors import NotFoundError, RelayError

from .repository import ProjectMappingStore
from .schemas import (
    DeletedProject,
    ProjectDeleteResponse,
    ProjectSummary,
    ProjectWebhookResponse,
)
from .service import ProjectSyncService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["projects"])


def get_project_sync_service(
    client: ClockifyClient = Depends(get_clockify_client),
    store: ProjectMappingStore = Depends(get_project_store),
) -> ProjectSyncService:
    return ProjectSyncService(client=client, store=store)


def _to_http_error(exc: RelayError, prefix: str) -> HTTPException:
    logger.error("%s: %s", prefix, exc.message)
    return HTTPException(status_code=exc.status_code, detail=f"{prefix}: {exc.message}")


@router.post(
    "/project-webhook",
    response_model=ProjectWebhookResponse,
    dependencies=[Depends(verify_webhook_secret)],
    summary="Notion プロジェクトを Clockify と同期",
)
def project_webhook(
    body: NotionWebhookEnvelope,
    service: ProjectSyncService = Depends(get_project_sync_service),
) -> ProjectWebhookResponse:
    """
    Notion プロジェクトページの Webhook を受け取り、Clockify プロジェクトとの対応を作成・更新する。

    - ペイロード不正 → 400
    - Clockify / DB エラー → 500
    """
    logger.debug("Project webhook payload: %s", body.data)
    try:
        event = parse_project_event(body.data)
        result = service.handle_project_event(event)
    except RelayError as exc:
        raise _to_http_error(exc, "Error processing project webhook") from exc
    except Exception as exc:  # noqa: BLE001
        logger.exception("Unexpected error while processing project webhook")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error processing project webhook: {exc}",
        ) from exc

    return ProjectWebhookResponse(
        message="Project webhook processed successfully",
        project_id=result.notion_id,
        project_name=result.name,
        created=result.created,
        updated=result.updated,
    )


@router.get(
    "/projects",
    response_model=List[ProjectSummary],
    summary="対応表に登録されたプロジェクト一覧",
)
def list_projects(
    store: ProjectMappingStore = Depends(get_project_store),
) -> List[ProjectSummary]:
    try:
        projects = store.list_all()
    except RelayError as exc:
        raise _to_http_error(exc, "Error retrieving projects") from exc

    logger.info("GET /projects - %d projects", len(projects))
    return projects


@router.delete(
    "/projects/{project_id}",
    response_model=ProjectDeleteResponse,
    summary="対応表からプロジェクトを削除",
)
def delete_project(
    project_id: int,
    store: ProjectMappingStore = Depends(get_project_store),
) -> ProjectDeleteResponse:
    """
    行 ID を指定して対応表から削除する。Clockify 側のプロジェクトは削除しない。

    - 存在しない ID → 404
    """
    try:
        deleted = store.delete_by_id(project_id)
        if deleted is None:
            raise NotFoundError("Project not found")
    except RelayError as exc:
        raise _to_http_error(exc, "Error deleting project") from exc

    return ProjectDeleteResponse(
        message="Project deleted successfully",
        deleted_project=DeletedProject(
            id=deleted.id,
            notion_id=deleted.notion_id,
            name=deleted.name,
        ),
    )
