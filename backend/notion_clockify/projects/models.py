# backend/notion_clockify/projects/models.py

"""
projects テーブルの ORM モデル。
"""

from sqlalchemy import Boolean, Column, DateTime, Integer, Text
from sqlalchemy.sql import func

from .database import Base


class ProjectModel(Base):
    """Notion プロジェクト ID と Clockify プロジェクトの対応 1 行。"""

    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, autoincrement=True)
    notion_id = Column(Text, nullable=False, unique=True, index=True)
    clockify_id = Column(Text, nullable=False)
    name = Column(Text, nullable=False)
    emoji = Column(Text, nullable=True)
    color = Column(Text, nullable=False, default="#000000", server_default="#000000")
    billable = Column(Boolean, nullable=False, default=True)
    public = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<Project(id={self.id}, notion_id={self.notion_id}, clockify_id={self.clockify_id})>"
