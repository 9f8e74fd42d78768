# backend/tests/test_project_service.py

from fakes import FakeClockifyClient, project_page
from notion_clockify.clockify.schemas import ClockifyProject
from notion_clockify.notion.parsers import parse_project_event
from notion_clockify.projects.schemas import ProjectRecord
from notion_clockify.projects.service import ProjectSyncService


def test_unmapped_project_is_created_and_saved(store, fake_clockify):
    service = ProjectSyncService(client=fake_clockify, store=store)

    result = service.handle_project_event(
        parse_project_event(project_page(notion_id="P1", name="Website", emoji="🚀"))
    )

    assert result.created is True
    assert result.updated is False
    assert fake_clockify.calls == [("find_or_create_project", "P1", "Website")]

    saved = store.get("P1")
    assert saved.clockify_id == result.clockify_id
    assert saved.name == "Website"
    assert saved.emoji == "🚀"
    assert saved.billable is True
    assert saved.public is False


def test_existing_clockify_project_is_reused_by_substring_match(store):
    client = FakeClockifyClient(projects=[ClockifyProject(id="c9", name="Legacy P1 project")])
    service = ProjectSyncService(client=client, store=store)

    result = service.handle_project_event(parse_project_event(project_page(notion_id="P1")))

    assert result.created is True
    assert result.clockify_id == "c9"
    assert store.get("P1").clockify_id == "c9"


def test_mapped_and_unchanged_project_is_a_no_op(store, fake_clockify):
    store.upsert("P1", ProjectRecord(clockify_id="c1", name="Website"))
    service = ProjectSyncService(client=fake_clockify, store=store)

    result = service.handle_project_event(parse_project_event(project_page(notion_id="P1", name="Website")))

    assert result.created is False
    assert result.updated is False
    assert fake_clockify.calls == []


def test_renamed_project_updates_clockify_and_mapping(store, fake_clockify):
    store.upsert("P1", ProjectRecord(clockify_id="c1", name="Website", color="#abcdef"))
    service = ProjectSyncService(client=fake_clockify, store=store)

    result = service.handle_project_event(
        parse_project_event(project_page(notion_id="P1", name="Website v2", emoji="🌐"))
    )

    assert result.created is False
    assert result.updated is True
    assert fake_clockify.calls == [("update_project", "c1", "🌐 Website v2", "#abcdef")]

    saved = store.get("P1")
    assert saved.clockify_id == "c1"
    assert saved.name == "Website v2"
    assert saved.emoji == "🌐"
    assert saved.color == "#abcdef"
