"""Freshness rules for cached AI summaries."""

from __future__ import annotations

from datetime import datetime, timedelta

from models import Paper

# Fixed policy; not configurable per call.
SUMMARY_FRESHNESS = timedelta(hours=24)


def is_fresh(paper: Paper, now: datetime) -> bool:
    """Return True if the paper's summary was generated within the freshness window."""
    if not paper.ai_summary or paper.ai_summary_at is None:
        return False
    return now - paper.ai_summary_at < SUMMARY_FRESHNESS


def has_source_text(paper: Paper) -> bool:
    return bool(paper.abstract_raw.strip() or paper.abstract_display.strip())


def needs_summary(paper: Paper, now: datetime) -> bool:
    """Return True if a summary should be (re)generated now.

    Papers without any source text are never regenerated; they pass through
    unchanged instead of being retried on every call.
    """
    return has_source_text(paper) and not is_fresh(paper, now)
