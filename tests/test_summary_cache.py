from datetime import UTC, datetime, timedelta

import pytest

from models import Paper
from summary_cache import has_source_text, is_fresh, needs_summary

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


def _paper(summary: str | None = None, summary_at: datetime | None = None, abstract: str = "Abstract.") -> Paper:
    return Paper(
        paper_id="p1",
        topic="t",
        external_id="2501.00001",
        title="A Paper",
        abstract_raw=abstract,
        abstract_display=abstract,
        ai_summary=summary,
        ai_summary_at=summary_at,
    )


def test_summary_from_23_hours_ago_is_fresh() -> None:
    paper = _paper("cached", NOW - timedelta(hours=23))
    assert is_fresh(paper, NOW) is True
    assert needs_summary(paper, NOW) is False


def test_summary_from_25_hours_ago_is_stale() -> None:
    paper = _paper("cached", NOW - timedelta(hours=25))
    assert is_fresh(paper, NOW) is False
    assert needs_summary(paper, NOW) is True


def test_exactly_24_hours_is_stale() -> None:
    assert is_fresh(_paper("cached", NOW - timedelta(hours=24)), NOW) is False


@pytest.mark.parametrize("summary,summary_at", [
    (None, None),
    ("cached", None),
    (None, NOW),
])
def test_missing_summary_or_timestamp_is_not_fresh(summary: str | None, summary_at: datetime | None) -> None:
    assert is_fresh(_paper(summary, summary_at), NOW) is False


def test_blank_source_text_is_never_regenerated() -> None:
    paper = _paper(abstract="   ")
    assert has_source_text(paper) is False
    assert needs_summary(paper, NOW) is False


def test_display_abstract_alone_counts_as_source_text() -> None:
    paper = _paper(abstract="")
    paper.abstract_display = "Only the display text."
    assert has_source_text(paper) is True
