# backend/notion_clockify/clockify/schemas.py

"""
Clockify API のレスポンスを内部で扱うためのスキーマ定義。

Clockify は多くのフィールドを返すが、ここでは連携に必要なものだけを宣言し、
それ以外はそのまま保持する（extra = "allow"）。
"""

from typing import Optional

from pydantic import BaseModel, Field


class ClockifyProject(BaseModel):
    """Clockify のプロジェクト。"""

    id: str = Field(..., description="Clockify プロジェクト ID")
    name: str = Field(..., description="プロジェクト名（Notion ID を含むことがある）")
    color: str = Field("#000000", description="表示色（hex）")
    billable: bool = Field(True, description="請求対象かどうか")
    public: bool = Field(False, description="ワークスペース内で公開されているか")

    class Config:
        extra = "allow"


class ClockifyTask(BaseModel):
    """Clockify のプロジェクト配下のタスク。"""

    id: str = Field(..., description="Clockify タスク ID")
    name: str = Field(..., description="タスク名（Notion の Task name と一致させる）")
    project_id: Optional[str] = Field(None, alias="projectId")

    class Config:
        extra = "allow"
        populate_by_name = True


class ClockifyTimeEntry(BaseModel):
    """Clockify の time entry。start / end の詳細は timeInterval に入る。"""

    id: str = Field(..., description="time entry ID")
    description: Optional[str] = None
    project_id: Optional[str] = Field(None, alias="projectId")

    class Config:
        extra = "allow"
        populate_by_name = True
