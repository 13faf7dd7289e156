"""CSV-backed chat history: user/bot message pairs grouped into sessions."""

from __future__ import annotations

import csv
import logging
import os
import uuid
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

LOGGER = logging.getLogger(__name__)

_DEFAULT_HISTORY_PATH = "chat_history.csv"

CSV_COLUMNS = [
    "session_id",
    "user_id",
    "title",      # clipped first user message, or NEW_SESSION_TITLE
    "role",       # user | bot
    "text",
    "timestamp",
]

_TITLE_MAX_LEN = 50

# Title for sessions opened by a question rather than a search.
NEW_SESSION_TITLE = "New Chat"


def append_exchange(user_id: str, user_text: str, bot_text: str, *, title: str | None = None) -> str:
    """Append one user message and one bot reply to the user's latest session.

    A new session is started when the user has none; it is titled ``title``,
    or the clipped user message when no title is given. Returns the session id.
    """
    path = history_path()
    rows = _read_rows(path)

    latest = next((row for row in reversed(rows) if row["user_id"] == user_id), None)
    if latest is None:
        session_id = uuid.uuid4().hex
        title = title or session_title(user_text)
    else:
        session_id = latest["session_id"]
        title = latest["title"]

    write_header = not path.exists() or path.stat().st_size == 0
    now = datetime.now(UTC).isoformat()
    with path.open("a", newline="", encoding="utf-8") as fh:
        writer = csv.DictWriter(fh, fieldnames=CSV_COLUMNS)
        if write_header:
            writer.writeheader()
        for role, text in (("user", user_text), ("bot", bot_text)):
            writer.writerow({
                "session_id": session_id,
                "user_id": user_id,
                "title": title,
                "role": role,
                "text": text,
                "timestamp": now,
            })

    LOGGER.info("Appended chat exchange for user_id=%s session_id=%s", user_id, session_id)
    return session_id


def sessions_for(user_id: str) -> list[dict[str, Any]]:
    """List a user's sessions, most recently updated first."""
    sessions: dict[str, dict[str, Any]] = {}
    for row in _read_rows(history_path()):
        if row["user_id"] != user_id:
            continue
        session = sessions.setdefault(
            row["session_id"],
            {
                "session_id": row["session_id"],
                "title": row["title"],
                "created_at": row["timestamp"],
                "updated_at": row["timestamp"],
                "message_count": 0,
            },
        )
        session["updated_at"] = row["timestamp"]
        session["message_count"] += 1

    return sorted(sessions.values(), key=lambda s: s["updated_at"], reverse=True)


def messages_for(session_id: str) -> list[dict[str, str]]:
    return [
        {"role": row["role"], "text": row["text"], "timestamp": row["timestamp"]}
        for row in _read_rows(history_path())
        if row["session_id"] == session_id
    ]


def history_path() -> Path:
    return Path(os.getenv("CHAT_HISTORY_PATH", _DEFAULT_HISTORY_PATH))


def session_title(text: str) -> str:
    text = text.strip()
    if len(text) > _TITLE_MAX_LEN:
        return text[:_TITLE_MAX_LEN] + "..."
    return text


def _read_rows(path: Path) -> list[dict[str, str]]:
    if not path.exists():
        return []

    with path.open(newline="", encoding="utf-8") as fh:
        return list(csv.DictReader(fh))
