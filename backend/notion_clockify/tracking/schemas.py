# backend/notion_clockify/tracking/schemas.py

"""
タスク追跡（/webhook）用の Pydantic スキーマ定義。
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class ActiveTrackingEntry(BaseModel):
    """
    1 タスク分の「いま計測中」レコード。

    存在すること自体が「Clockify で time entry が開いている」ことを意味する。
    """

    time_entry_id: str = Field(..., description="Clockify time entry ID")
    project_id: Optional[str] = Field(None, description="Clockify プロジェクト ID")
    task_id: Optional[str] = Field(None, description="Clockify タスク ID")
    task_name: str = Field(..., description="開始時点の Notion タスク名（停止時の照合に使う）")


class TrackingAction(str, Enum):
    """1 回の Webhook で実際に行った処理。"""

    STARTED = "started"
    ALREADY_TRACKING = "already_tracking"
    STOPPED_ALL = "stopped_all"
    STOPPED = "stopped"
    IGNORED = "ignored"
    NOT_TRACKING = "not_tracking"


class ReconciliationResult(BaseModel):
    action: TrackingAction
    entry: Optional[ActiveTrackingEntry] = None
    clockify_project_id: Optional[str] = None


class TaskWebhookResponse(BaseModel):
    """POST /webhook のレスポンス。"""

    message: str
    action: TrackingAction
    task_id: str = Field(..., alias="taskId")
    task_name: str = Field(..., alias="taskName")
    project_id: Optional[str] = Field(None, alias="projectId", description="Notion プロジェクト ID")
    is_project_icon: bool = Field(False, alias="isProjectIcon")
    clockify_project_id: Optional[str] = Field(None, alias="clockifyProjectId")

    class Config:
        populate_by_name = True
