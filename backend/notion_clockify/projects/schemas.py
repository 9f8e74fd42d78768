# backend/notion_clockify/projects/schemas.py

"""
プロジェクト対応表と /project-webhook, /projects 用の Pydantic スキーマ定義。

HTTP レスポンスは既存クライアントとの互換のため camelCase（alias）で返す。
"""

from typing import Optional

from pydantic import BaseModel, Field


class ProjectRecord(BaseModel):
    """Notion プロジェクト ID に紐づく Clockify プロジェクト情報（DB の 1 行の値部分）。"""

    clockify_id: str = Field(..., description="Clockify プロジェクト ID")
    name: str = Field(..., description="表示名")
    emoji: Optional[str] = Field(None, description="Notion アイコンの絵文字")
    color: str = Field("#000000", description="表示色（hex）")
    billable: bool = Field(True, description="請求対象かどうか")
    public: bool = Field(False, description="公開プロジェクトかどうか")


class ProjectSummary(BaseModel):
    """GET /projects の 1 要素。"""

    id: int = Field(..., description="projects テーブルの行 ID")
    notion_id: str = Field(..., alias="notionId")
    name: str
    clockify_id: str = Field(..., alias="clockifyId")
    emoji: Optional[str] = None

    class Config:
        populate_by_name = True


class DeletedProject(BaseModel):
    id: int
    notion_id: str = Field(..., alias="notionId")
    name: str

    class Config:
        populate_by_name = True


class ProjectDeleteResponse(BaseModel):
    """DELETE /projects/{id} のレスポンス。"""

    message: str
    deleted_project: DeletedProject = Field(..., alias="deletedProject")

    class Config:
        populate_by_name = True


class ProjectWebhookResponse(BaseModel):
    """POST /project-webhook のレスポンス。"""

    message: str
    project_id: str = Field(..., alias="projectId", description="Notion プロジェクト ID")
    project_name: str = Field(..., alias="projectName")
    created: bool = Field(..., description="Clockify 側 / 対応表に新規作成したか")
    updated: bool = Field(False, description="既存の対応の名前・絵文字を更新したか")

    class Config:
        populate_by_name = True
