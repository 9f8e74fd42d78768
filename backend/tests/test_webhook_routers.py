# backend/tests/test_webhook_routers.py

import pytest
from fastapi.testclient import TestClient

from fakes import project_page, task_page
from notion_clockify.dependencies import get_clockify_client, get_project_store
from notion_clockify.main import create_app
from notion_clockify.projects.schemas import ProjectRecord
from notion_clockify.tracking.state import get_active_task_registry
from notion_clockify.utils.errors import UpstreamError

SECRET_HEADERS = {"secret": "test-secret"}


def _create_client(store, clockify, registry) -> TestClient:
    app = create_app()
    app.dependency_overrides[get_project_store] = lambda: store
    app.dependency_overrides[get_clockify_client] = lambda: clockify
    app.dependency_overrides[get_active_task_registry] = lambda: registry
    return TestClient(app)


# ---- 認証 -------------------------------------------------------------


def test_webhook_rejects_missing_secret(store, fake_clockify, registry):
    client = _create_client(store, fake_clockify, registry)

    resp = client.post("/webhook", json={"data": task_page(status_id="in-progress")})

    assert resp.status_code == 401
    assert fake_clockify.calls == []


def test_project_webhook_rejects_wrong_secret(store, fake_clockify, registry):
    client = _create_client(store, fake_clockify, registry)

    resp = client.post(
        "/project-webhook",
        json={"data": project_page()},
        headers={"secret": "wrong"},
    )

    assert resp.status_code == 401
    assert store.list_all() == []


# ---- /webhook ---------------------------------------------------------


def test_task_webhook_starts_tracking(store, fake_clockify, registry):
    client = _create_client(store, fake_clockify, registry)

    resp = client.post(
        "/webhook",
        json={"data": task_page(task_id="T1", name="Write docs", status_id="in-progress")},
        headers=SECRET_HEADERS,
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "Task webhook processed successfully"
    assert body["action"] == "started"
    assert body["taskId"] == "T1"
    assert body["taskName"] == "Write docs"
    assert body["projectId"] is None
    assert body["isProjectIcon"] is False
    assert body["clockifyProjectId"] is None
    assert "T1" in registry


def test_task_webhook_reports_icon_project(store, fake_clockify, registry):
    client = _create_client(store, fake_clockify, registry)

    resp = client.post(
        "/webhook",
        json={
            "data": task_page(
                status_id="in-progress",
                project_id="P1",
                project_icon={"type": "emoji", "emoji": "📁"},
            )
        },
        headers=SECRET_HEADERS,
    )

    assert resp.status_code == 200
    assert resp.json()["projectId"] == "P1"
    assert resp.json()["isProjectIcon"] is True
    assert resp.json()["clockifyProjectId"] is None


def test_task_webhook_start_then_stop(store, fake_clockify, registry):
    client = _create_client(store, fake_clockify, registry)

    client.post("/webhook", json={"data": task_page(status_id="in-progress")}, headers=SECRET_HEADERS)
    resp = client.post("/webhook", json={"data": task_page(status_id="done")}, headers=SECRET_HEADERS)

    assert resp.status_code == 200
    assert resp.json()["action"] == "stopped_all"
    assert len(registry) == 0
    assert fake_clockify.call_names()[-1] == "stop_all_time_entries"


def test_task_webhook_malformed_payload_returns_400(store, fake_clockify, registry):
    client = _create_client(store, fake_clockify, registry)

    resp = client.post(
        "/webhook",
        json={"data": {"id": "T1", "properties": {}}},
        headers=SECRET_HEADERS,
    )

    assert resp.status_code == 400
    assert "Task name" in resp.json()["detail"]


def test_task_webhook_missing_data_returns_400(store, fake_clockify, registry):
    client = _create_client(store, fake_clockify, registry)

    resp = client.post("/webhook", json={}, headers=SECRET_HEADERS)

    assert resp.status_code == 400


@pytest.mark.parametrize("path", ["/webhook", "/project-webhook"])
@pytest.mark.parametrize("data", ["oops", [1, 2], 42])
def test_non_object_data_returns_400(store, fake_clockify, registry, path, data):
    client = _create_client(store, fake_clockify, registry)

    resp = client.post(path, json={"data": data}, headers=SECRET_HEADERS)

    assert resp.status_code == 400
    assert "'data' page object" in resp.json()["detail"]
    assert fake_clockify.calls == []


def test_task_webhook_upstream_error_returns_500(store, fake_clockify, registry):
    def broken_start(*args, **kwargs):
        raise UpstreamError("Clockify is down")

    fake_clockify.start_time_entry = broken_start
    client = _create_client(store, fake_clockify, registry)

    resp = client.post("/webhook", json={"data": task_page(status_id="in-progress")}, headers=SECRET_HEADERS)

    assert resp.status_code == 500
    assert resp.headers["content-type"].startswith("text/plain")
    assert resp.text == "Error processing webhook: Clockify is down"


def test_task_webhook_unexpected_error_returns_500(store, fake_clockify, registry):
    def crash(*args, **kwargs):
        raise RuntimeError("boom")

    fake_clockify.start_time_entry = crash
    client = _create_client(store, fake_clockify, registry)

    resp = client.post("/webhook", json={"data": task_page(status_id="in-progress")}, headers=SECRET_HEADERS)

    assert resp.status_code == 500


# ---- /project-webhook -------------------------------------------------


def test_project_webhook_creates_mapping(store, fake_clockify, registry):
    client = _create_client(store, fake_clockify, registry)

    resp = client.post(
        "/project-webhook",
        json={"data": project_page(notion_id="P1", name="Website", emoji="🚀")},
        headers=SECRET_HEADERS,
    )

    assert resp.status_code == 200
    assert resp.json() == {
        "message": "Project webhook processed successfully",
        "projectId": "P1",
        "projectName": "Website",
        "created": True,
        "updated": False,
    }
    assert store.get("P1").emoji == "🚀"


def test_project_webhook_existing_project_is_not_created_again(store, fake_clockify, registry):
    store.upsert("P1", ProjectRecord(clockify_id="c1", name="Website"))
    client = _create_client(store, fake_clockify, registry)

    resp = client.post(
        "/project-webhook",
        json={"data": project_page(notion_id="P1", name="Website")},
        headers=SECRET_HEADERS,
    )

    assert resp.status_code == 200
    assert resp.json()["created"] is False
    assert fake_clockify.calls == []


def test_project_webhook_without_title_uses_fallback_name(store, fake_clockify, registry):
    client = _create_client(store, fake_clockify, registry)

    resp = client.post(
        "/project-webhook",
        json={"data": {"id": "P7", "properties": {}}},
        headers=SECRET_HEADERS,
    )

    assert resp.status_code == 200
    assert resp.json()["projectName"] == "Project P7"


def test_project_webhook_upstream_error_is_plain_text(store, fake_clockify, registry):
    def broken_find(*args, **kwargs):
        raise UpstreamError("Clockify is down")

    fake_clockify.find_or_create_project = broken_find
    client = _create_client(store, fake_clockify, registry)

    resp = client.post(
        "/project-webhook",
        json={"data": project_page(notion_id="P1", name="Website")},
        headers=SECRET_HEADERS,
    )

    assert resp.status_code == 500
    assert resp.headers["content-type"].startswith("text/plain")
    assert resp.text == "Error processing project webhook: Clockify is down"
    assert store.get("P1") is None


# ---- /projects --------------------------------------------------------


def test_list_and_delete_projects(store, fake_clockify, registry):
    store.upsert("P1", ProjectRecord(clockify_id="c1", name="Website", emoji="🚀"))
    store.upsert("P2", ProjectRecord(clockify_id="c2", name="Mobile"))
    client = _create_client(store, fake_clockify, registry)

    resp = client.get("/projects")
    assert resp.status_code == 200
    assert resp.json() == [
        {"id": 1, "notionId": "P1", "name": "Website", "clockifyId": "c1", "emoji": "🚀"},
        {"id": 2, "notionId": "P2", "name": "Mobile", "clockifyId": "c2", "emoji": None},
    ]

    resp = client.delete("/projects/1")
    assert resp.status_code == 200
    assert resp.json() == {
        "message": "Project deleted successfully",
        "deletedProject": {"id": 1, "notionId": "P1", "name": "Website"},
    }

    resp = client.get("/projects")
    assert [p["notionId"] for p in resp.json()] == ["P2"]


def test_delete_unknown_project_returns_404(store, fake_clockify, registry):
    client = _create_client(store, fake_clockify, registry)

    resp = client.delete("/projects/42")

    assert resp.status_code == 404


def test_delete_non_numeric_id_is_rejected(store, fake_clockify, registry):
    client = _create_client(store, fake_clockify, registry)

    resp = client.delete("/projects/abc")

    assert resp.status_code == 422


def test_health_check():
    resp = TestClient(create_app()).get("/health")

    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}
