#!/usr/bin/env python3
"""
ブラウザ等で保存した HAR ファイルから Notion Webhook を再送する開発用スクリプト。

使い方:
  python scripts/send_test_webhook.py captures/task.har --endpoint /webhook
  python scripts/send_test_webhook.py captures/project.har --endpoint /project-webhook

NOTION_WEBHOOK_SECRET を `secret` ヘッダーとして付与する。
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path
from typing import Any, Dict, Tuple

import httpx
from dotenv import load_dotenv


def extract_request_data(har: Dict[str, Any]) -> Tuple[Dict[str, Any], Dict[str, str]]:
    """HAR の先頭エントリから JSON ボディとヘッダーを取り出す。"""
    entries = (har.get("log") or {}).get("entries") or []
    if not entries:
        raise ValueError("Invalid HAR: no entries")

    request = entries[0].get("request") or {}
    post_data = request.get("postData") or {}
    if "text" not in post_data:
        raise ValueError("Invalid HAR: first entry has no postData.text")

    body = json.loads(post_data["text"])
    headers = {h["name"]: h["value"] for h in request.get("headers", []) if "name" in h}
    return body, headers


def send(path: Path, base_url: str, endpoint: str, secret: str) -> httpx.Response:
    har = json.loads(path.read_text(encoding="utf-8"))
    body, headers = extract_request_data(har)

    print(f"Sending {path.name} to {base_url}{endpoint}")
    print(json.dumps(body, indent=2, ensure_ascii=False))

    return httpx.post(
        f"{base_url.rstrip('/')}{endpoint}",
        json=body,
        headers={
            "secret": secret,
            "user-agent": headers.get("user-agent", "NotionAutomation"),
        },
        timeout=30.0,
    )


def main() -> int:
    load_dotenv()

    parser = argparse.ArgumentParser(description="Replay Notion webhooks from HAR files.")
    parser.add_argument("files", nargs="+", type=Path, help="HAR files to replay")
    parser.add_argument("--endpoint", default="/webhook", help="/webhook or /project-webhook")
    parser.add_argument("--url", default="http://localhost:8000", help="server base URL")
    args = parser.parse_args()

    secret = os.getenv("NOTION_WEBHOOK_SECRET", "")
    if not secret:
        print("NOTION_WEBHOOK_SECRET is not set.", file=sys.stderr)
        return 2

    failures = 0
    for path in args.files:
        try:
            response = send(path, args.url, args.endpoint, secret)
        except (OSError, ValueError, httpx.HTTPError) as exc:
            print(f"FAILED {path.name}: {exc}", file=sys.stderr)
            failures += 1
            continue

        print(f"{response.status_code} {response.text}")
        if response.status_code >= 400:
            failures += 1

    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
