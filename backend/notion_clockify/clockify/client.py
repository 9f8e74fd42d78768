# backend/notion_clockify/clockify/client.py

"""
Clockify API との通信を担当するクライアントモジュール。

リトライは行わず、HTTP エラーや不正なレスポンスは
すべて ClockifyClientError（UpstreamError のサブクラス）として上位に伝える。
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from notion_clockify.utils.errors import UpstreamError

from .config import ClockifyConfig, get_clockify_config
from .schemas import ClockifyProject, ClockifyTask, ClockifyTimeEntry

logger = logging.getLogger(__name__)

DEFAULT_PROJECT_COLOR = "#000000"


class ClockifyClientError(UpstreamError):
    """Clockify クライアント全般の例外。"""


class ClockifyAuthError(ClockifyClientError):
    """認証・権限関連のエラー。"""


class ClockifyAPIError(ClockifyClientError):
    """その他 Clockify API 呼び出し時のエラー。"""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.http_status = status_code


def _error_message(response: httpx.Response) -> str:
    """
    エラーレスポンスからメッセージを取り出す。
    Clockify は {"message": "...", "code": 501} 形式で返すことが多い。
    """
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"

    if isinstance(body, dict) and isinstance(body.get("message"), str):
        return body["message"]
    return response.text or f"HTTP {response.status_code}"


class ClockifyClient:
    """
    Clockify REST API の薄いラッパークライアント。

    - プロジェクトの検索・作成・更新
    - タスクの検索・作成
    - time entry の開始・停止
    """

    def __init__(self, config: Optional[ClockifyConfig] = None) -> None:
        self.config = config or get_clockify_config()

    # ---- 内部ヘルパー -------------------------------------------------

    def _now(self) -> str:
        """Clockify が受け付ける UTC の ISO8601 文字列。"""
        return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")

    def _build_headers(self) -> Dict[str, str]:
        return {
            "X-Api-Key": self.config.api_key,
            "Content-Type": "application/json",
        }

    def _workspace_url(self, path: str) -> str:
        return f"{self.config.api_base_url}/workspaces/{self.config.workspace_id}{path}"

    def _raise_for_status(self, response: httpx.Response) -> None:
        """
        HTTP レスポンスコードに応じて適切な例外を投げる。
        """
        if response.status_code in (401, 403):
            raise ClockifyAuthError(
                f"Clockify rejected the request ({response.status_code}): "
                f"{_error_message(response)}"
            )
        if response.status_code >= 400:
            raise ClockifyAPIError(
                _error_message(response),
                status_code=response.status_code,
            )

    def _request(
        self,
        method: str,
        url: str,
        payload: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        1 回だけリクエストを送り、JSON ボディを返す。
        """
        logger.debug("Clockify %s %s payload=%s", method, url, payload)
        try:
            response = httpx.request(
                method,
                url,
                headers=self._build_headers(),
                json=payload,
                timeout=self.config.timeout_seconds,
            )
        except httpx.RequestError as exc:
            raise ClockifyClientError(f"Failed to call Clockify API: {exc}") from exc

        self._raise_for_status(response)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise ClockifyAPIError(
                "Unexpected Clockify API response: body is not JSON.",
                status_code=response.status_code,
            ) from exc

    def _request_list(self, method: str, url: str) -> List[Dict[str, Any]]:
        data = self._request(method, url)
        if not isinstance(data, list):
            raise ClockifyAPIError("Unexpected Clockify API response: expected a list.")
        return data

    @staticmethod
    def _parse(model, data: Any):
        try:
            return model.model_validate(data)
        except ValidationError as exc:
            raise ClockifyAPIError(
                f"Unexpected Clockify API response for {model.__name__}: {exc}"
            ) from exc

    # ---- プロジェクト ---------------------------------------------------

    def list_projects(self) -> List[ClockifyProject]:
        url = self._workspace_url("/projects")
        return [self._parse(ClockifyProject, p) for p in self._request_list("GET", url)]

    def find_or_create_project(
        self,
        source_id: str,
        display_name: Optional[str] = None,
    ) -> ClockifyProject:
        """
        Notion プロジェクト ID に対応する Clockify プロジェクトを返す。

        プロジェクト名に source_id を「部分文字列として含む」最初のものを既存とみなす。
        一方の ID が他方の部分文字列になっていると誤一致しうるが、
        Clockify 側の名前は人が読む表示名でもあるため厳密一致にはしていない。
        見つからない場合は新規作成する。
        """
        logger.info("Searching Clockify project for Notion id %s", source_id)
        for project in self.list_projects():
            if source_id in project.name:
                logger.info("Existing Clockify project found: %s", project.id)
                return project

        logger.info("Creating Clockify project for Notion id %s", source_id)
        body = {
            "name": display_name or f"Project {source_id}",
            "color": DEFAULT_PROJECT_COLOR,
            "billable": True,
            "public": False,
        }
        created = self._request("POST", self._workspace_url("/projects"), body)
        return self._parse(ClockifyProject, created)

    def update_project(self, project_id: str, name: str, color: str) -> ClockifyProject:
        """プロジェクト名（と色）を更新する。Notion 側の名前変更の反映に使う。"""
        url = self._workspace_url(f"/projects/{project_id}")
        updated = self._request("PUT", url, {"name": name, "color": color})
        return self._parse(ClockifyProject, updated)

    # ---- タスク ---------------------------------------------------------

    def find_or_create_task(
        self,
        task_name: str,
        project_id: Optional[str],
    ) -> Optional[ClockifyTask]:
        """
        プロジェクト配下から名前が完全一致するタスクを探し、なければ作成する。

        project_id が無い場合はタスクを扱えないので None を返す。
        """
        if not project_id:
            logger.info("No project given; skipping Clockify task lookup.")
            return None

        url = self._workspace_url(f"/projects/{project_id}/tasks")
        for raw in self._request_list("GET", url):
            task = self._parse(ClockifyTask, raw)
            if task.name == task_name:
                logger.debug("Existing Clockify task found: %s", task.id)
                return task

        logger.info("Creating Clockify task %r in project %s", task_name, project_id)
        created = self._request("POST", url, {"name": task_name, "projectId": project_id})
        return self._parse(ClockifyTask, created)

    # ---- time entry -----------------------------------------------------

    def start_time_entry(
        self,
        task_id: str,
        task_name: str,
        project_id: Optional[str] = None,
        formatted_id: Optional[str] = None,
    ) -> ClockifyTimeEntry:
        """
        start = 現在時刻 で time entry を開始する。

        description は "{formatted_id または task_id} : {task_name}"。
        """
        description = f"{formatted_id or task_id} : {task_name}"
        body: Dict[str, Any] = {
            "start": self._now(),
            "description": description,
        }
        if project_id:
            body["projectId"] = project_id

        logger.info("Starting time entry: %s", description)
        created = self._request("POST", self._workspace_url("/time-entries"), body)
        return self._parse(ClockifyTimeEntry, created)

    def stop_time_entry(self, time_entry_id: str) -> Any:
        """指定した time entry に end = 現在時刻 を設定する。"""
        logger.info("Stopping time entry %s", time_entry_id)
        url = self._workspace_url(f"/time-entries/{time_entry_id}")
        return self._request("PATCH", url, {"end": self._now()})

    def get_current_user_id(self) -> str:
        """API キーに紐づくユーザーの ID を返す。"""
        data = self._request("GET", f"{self.config.api_base_url}/user")
        if not isinstance(data, dict) or not isinstance(data.get("id"), str):
            raise ClockifyAPIError("Unexpected Clockify API response: user id is missing.")
        return data["id"]

    def stop_all_time_entries(self) -> Any:
        """
        認証ユーザーの実行中 time entry をまとめて停止する（1 回の PATCH）。
        """
        user_id = self.get_current_user_id()
        logger.info("Stopping all running time entries for user %s", user_id)
        url = self._workspace_url(f"/user/{user_id}/time-entries")
        return self._request("PATCH", url, {"end": self._now()})
