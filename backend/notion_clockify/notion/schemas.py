# backend/notion_clockify/notion/schemas.py

"""
Notion Webhook から取り出したデータを内部で扱うためのスキーマ定義。
"""

from typing import Any, Optional

from pydantic import BaseModel, Field

IN_PROGRESS_STATUS_ID = "in-progress"


class NotionWebhookEnvelope(BaseModel):
    """
    Notion オートメーションが送ってくるリクエストボディ。

    data にはページオブジェクトがそのまま入る。形が揺れるため型を絞らずに受け取り、
    dict 以外も含めて parsers 側で検証する（不正な形は 400）。
    """

    data: Optional[Any] = Field(None, description="Notion ページオブジェクト")

    class Config:
        extra = "allow"


class ProjectRelation(BaseModel):
    """タスクの Project リレーションの 1 件目。"""

    id: str = Field(..., description="Notion プロジェクトページ ID")
    is_icon: bool = Field(
        False,
        description="リレーション先がアイコン（emoji / external）として表現されているか",
    )


class ProjectEvent(BaseModel):
    """プロジェクトページの Webhook 1 件分。"""

    notion_id: str = Field(..., description="Notion プロジェクトページ ID")
    name: str = Field(..., description="プロジェクト名（取れない場合は 'Project {id}'）")
    emoji: Optional[str] = Field(None, description="icon.type == emoji の場合の絵文字")
    has_custom_icon: bool = Field(False, description="icon.type == external かどうか")

    @property
    def display_name(self) -> str:
        """Clockify 側に表示する名前（絵文字があれば先頭に付ける）。"""
        return f"{self.emoji} {self.name}" if self.emoji else self.name


class TaskEvent(BaseModel):
    """タスクページの Webhook 1 件分。"""

    task_id: str = Field(..., description="Notion タスクページ ID")
    task_name: str = Field(..., description="Task name プロパティのテキスト")
    formatted_id: Optional[str] = Field(None, description="ID(unique_id) を 'PREFIX-N' 形式にしたもの")
    status_id: Optional[str] = Field(None, description="Status.status.id")
    status_name: Optional[str] = Field(None, description="Status.status.name（ログ用）")
    project: Optional[ProjectRelation] = Field(None, description="Project リレーションの 1 件目")

    @property
    def is_in_progress(self) -> bool:
        # Status プロパティが無い場合も「進行中ではない」として扱う
        return self.status_id == IN_PROGRESS_STATUS_ID

    @property
    def label(self) -> str:
        return f"{self.formatted_id or self.task_id} - {self.task_name}"
