# backend/notion_clockify/notion/parsers.py

"""
Notion ページオブジェクト → 内部イベントモデルへの変換。

Notion オートメーションのペイロードは時期によって形が異なるため、
タイトルの取り出しは「戦略」のリストを順に試し、最初に取れたものを使う。
ここの関数はすべて副作用のない純粋関数。
"""

from typing import Any, Callable, Dict, List, Optional, Sequence

from notion_clockify.utils.errors import MalformedPayloadError

from .schemas import ProjectEvent, ProjectRelation, TaskEvent

TitleStrategy = Callable[[Dict[str, Any]], Optional[str]]

_ICON_TYPES = ("emoji", "external")


def _first_rich_text(items: Any) -> Optional[str]:
    """
    title / rich_text 配列の先頭要素からテキストを取り出す。
    text.content を優先し、無ければ plain_text を使う。
    """
    if not isinstance(items, list) or not items:
        return None

    first = items[0]
    if not isinstance(first, dict):
        return None

    text = first.get("text")
    if isinstance(text, dict) and isinstance(text.get("content"), str):
        return text["content"]

    plain = first.get("plain_text")
    if isinstance(plain, str):
        return plain
    return None


def property_title(prop_name: str) -> TitleStrategy:
    """properties[prop_name].title から読む戦略を作る。"""

    def _strategy(page: Dict[str, Any]) -> Optional[str]:
        properties = page.get("properties") or {}
        prop = properties.get(prop_name)
        if not isinstance(prop, dict):
            return None
        return _first_rich_text(prop.get("title"))

    _strategy.__name__ = f"property_title[{prop_name}]"
    return _strategy


def page_title(page: Dict[str, Any]) -> Optional[str]:
    """ページ直下の title 配列から読む戦略。"""
    return _first_rich_text(page.get("title"))


PROJECT_TITLE_STRATEGIES: Sequence[TitleStrategy] = (
    property_title("Project name"),
    property_title("Name"),
    page_title,
)

TASK_TITLE_STRATEGIES: Sequence[TitleStrategy] = (
    property_title("Task name"),
    property_title("Name"),
    page_title,
)


def extract_title(page: Dict[str, Any], strategies: Sequence[TitleStrategy]) -> Optional[str]:
    """
    戦略を順に試し、最初に得られた空でないタイトルを返す。
    """
    for strategy in strategies:
        title = strategy(page)
        if title:
            return title
    return None


def extract_emoji(page: Dict[str, Any]) -> Optional[str]:
    icon = page.get("icon")
    if isinstance(icon, dict) and icon.get("type") == "emoji":
        emoji = icon.get("emoji")
        if isinstance(emoji, str):
            return emoji
    return None


def has_custom_icon(page: Dict[str, Any]) -> bool:
    icon = page.get("icon")
    return isinstance(icon, dict) and icon.get("type") == "external"


def is_icon_relation(relation: Optional[Dict[str, Any]]) -> bool:
    """
    リレーション先が「アイコンとして表現されたページ」かどうか。

    NOTE: 該当する場合はプロジェクト未指定として扱う。Notion 側のデータの癖への
    回避策である可能性が高いが、既存の挙動として残している。
    """
    if not isinstance(relation, dict):
        return False
    icon = relation.get("icon")
    return isinstance(icon, dict) and icon.get("type") in _ICON_TYPES


def format_task_id(properties: Dict[str, Any]) -> Optional[str]:
    """
    ID（unique_id）プロパティを 'PREFIX-NUMBER' 形式にする。
    prefix が無いデータベースでは番号のみを返す。
    """
    prop = properties.get("ID")
    if not isinstance(prop, dict):
        return None
    unique_id = prop.get("unique_id")
    if not isinstance(unique_id, dict) or unique_id.get("number") is None:
        return None

    prefix = unique_id.get("prefix")
    number = unique_id["number"]
    return f"{prefix}-{number}" if prefix else str(number)


def extract_status(properties: Dict[str, Any]) -> Dict[str, Optional[str]]:
    """Status.status から id と name を取り出す。無ければどちらも None。"""
    prop = properties.get("Status")
    status = prop.get("status") if isinstance(prop, dict) else None
    if not isinstance(status, dict):
        return {"id": None, "name": None}
    return {"id": status.get("id"), "name": status.get("name")}


def extract_project_relation(properties: Dict[str, Any]) -> Optional[ProjectRelation]:
    """Project リレーションの 1 件目を返す。リレーションが無ければ None。"""
    prop = properties.get("Project")
    if not isinstance(prop, dict):
        return None

    relations: List[Any] = prop.get("relation") or []
    if not relations or not isinstance(relations[0], dict):
        return None

    first = relations[0]
    relation_id = first.get("id")
    if not isinstance(relation_id, str) or not relation_id:
        return None
    return ProjectRelation(id=relation_id, is_icon=is_icon_relation(first))


def _require_page(page: Any) -> Dict[str, Any]:
    if not isinstance(page, dict):
        raise MalformedPayloadError("Payload is missing the 'data' page object.")
    page_id = page.get("id")
    if not isinstance(page_id, str) or not page_id:
        raise MalformedPayloadError("Payload page object has no 'id'.")
    return page


def parse_project_event(page: Any) -> ProjectEvent:
    """
    プロジェクトページを ProjectEvent に変換する。

    名前が見つからない場合は 'Project {id}' をフォールバックとして使う。
    """
    page = _require_page(page)
    notion_id = page["id"]
    name = extract_title(page, PROJECT_TITLE_STRATEGIES) or f"Project {notion_id}"

    return ProjectEvent(
        notion_id=notion_id,
        name=name,
        emoji=extract_emoji(page),
        has_custom_icon=has_custom_icon(page),
    )


def parse_task_event(page: Any) -> TaskEvent:
    """
    タスクページを TaskEvent に変換する。

    タスク名は停止時の同一性チェックに使うため、取れない場合は MalformedPayloadError。
    """
    page = _require_page(page)
    properties = page.get("properties")
    if not isinstance(properties, dict):
        raise MalformedPayloadError("Task page has no 'properties'.")

    task_name = extract_title(page, TASK_TITLE_STRATEGIES)
    if not task_name:
        raise MalformedPayloadError("Task page has no 'Task name' title.")

    status = extract_status(properties)
    return TaskEvent(
        task_id=page["id"],
        task_name=task_name,
        formatted_id=format_task_id(properties),
        status_id=status["id"],
        status_name=status["name"],
        project=extract_project_relation(properties),
    )
