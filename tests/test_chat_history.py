from __future__ import annotations

from pathlib import Path

import pytest

import chat_history


@pytest.fixture(autouse=True)
def patch_history_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Point CHAT_HISTORY_PATH at a temp file for every test."""
    monkeypatch.setenv("CHAT_HISTORY_PATH", str(tmp_path / "history.csv"))


def test_first_exchange_creates_session_with_title() -> None:
    session_id = chat_history.append_exchange("u1", "Find papers on diffusion", "I found 3 papers.")

    sessions = chat_history.sessions_for("u1")
    assert len(sessions) == 1
    assert sessions[0]["session_id"] == session_id
    assert sessions[0]["title"] == "Find papers on diffusion"
    assert sessions[0]["message_count"] == 2


def test_later_exchanges_reuse_latest_session() -> None:
    first = chat_history.append_exchange("u1", "hello", "hi")
    second = chat_history.append_exchange("u1", "again", "sure")

    assert first == second
    messages = chat_history.messages_for(first)
    assert [(m["role"], m["text"]) for m in messages] == [
        ("user", "hello"),
        ("bot", "hi"),
        ("user", "again"),
        ("bot", "sure"),
    ]


def test_users_do_not_share_sessions() -> None:
    a = chat_history.append_exchange("alice", "q", "a")
    b = chat_history.append_exchange("bob", "q", "a")

    assert a != b
    assert [s["session_id"] for s in chat_history.sessions_for("alice")] == [a]
    assert chat_history.sessions_for("carol") == []


def test_bot_text_with_newlines_and_commas_round_trips() -> None:
    reply = "**Title**\nLine one, with a comma.\n\n**Other**\n\"quoted\""
    session_id = chat_history.append_exchange("u1", "q", reply)
    assert chat_history.messages_for(session_id)[1]["text"] == reply


def test_session_title_is_clipped() -> None:
    title = chat_history.session_title("x" * 60)
    assert title == "x" * 50 + "..."
    assert chat_history.session_title("short") == "short"


def test_explicit_title_names_a_new_session_only() -> None:
    first = chat_history.append_exchange("u1", "What is the main result?", "It works.", title="New Chat")
    second = chat_history.append_exchange("u1", "Why?", "Because.", title="Ignored")

    assert first == second
    (session,) = chat_history.sessions_for("u1")
    assert session["title"] == "New Chat"
