# backend/notion_clockify/__init__.py
"""
Notion → Clockify bridge application package.

This package contains:
- main: FastAPI application entrypoint
- clockify: Clockify REST API client
- notion: Notion webhook payload parsing
- projects: Notion/Clockify project mapping store and sync
- tracking: time entry start/stop reconciliation
"""
