"""Shared typed models for the paper search pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime


@dataclass(frozen=True, slots=True)
class RawResult:
    """One entry from the literature feed, before scoring or persistence."""

    external_id: str | None
    title: str
    abstract: str
    authors: tuple[str, ...] = ()
    published_at: datetime | None = None
    pdf_url: str = ""
    source_url: str = ""


@dataclass(frozen=True, slots=True)
class ScoredCandidate:
    """A feed result carrying its transient relevance score."""

    result: RawResult
    score: int


@dataclass(frozen=True, slots=True)
class SearchQuery:
    """Structured feed query built from a free-text topic."""

    expression: str
    seed_fallback: bool
    fetch_limit: int


@dataclass(slots=True)
class Paper:
    """Persisted paper record, keyed by external id (or title when absent)."""

    paper_id: str
    topic: str
    external_id: str | None
    title: str
    authors: list[str] = field(default_factory=list)
    abstract_raw: str = ""
    abstract_display: str = ""
    pdf_url: str = ""
    source_url: str = ""
    published_at: datetime | None = None
    ai_summary: str | None = None
    ai_summary_at: datetime | None = None
    created_at: datetime | None = None

    def best_text(self) -> str:
        """Return the AI summary if present, else the feed abstract."""
        return self.ai_summary or self.abstract_raw or self.abstract_display or ""

    def copy(self) -> Paper:
        return replace(self, authors=list(self.authors))
