"""Keyword relevance scoring and ranking of raw feed results (no LLM calls)."""

from __future__ import annotations

from landmark import ARCHITECTURE_TERM, LANDMARK_PAPER, is_landmark
from models import RawResult, ScoredCandidate

# Additive weights. Absolute values are tunable; the ordering
# landmark > exact title > domain > title word > abstract word is not.
LANDMARK_BONUS = 15
EXACT_TITLE_BONUS = 10
DOMAIN_BONUS = 5
TITLE_WORD_POINTS = 3
ABSTRACT_WORD_POINTS = 1

_DOMAIN_TOPIC_TERM = "attention"


def score_result(result: RawResult, topic: str) -> int:
    """Return the integer relevance score of one result for a topic."""
    topic_lower = topic.strip().lower()
    title = result.title.lower()
    abstract = result.abstract.lower()

    score = 0
    if topic_lower and topic_lower in title:
        score += EXACT_TITLE_BONUS

    for term in topic_lower.split():
        if term in title:
            score += TITLE_WORD_POINTS
        if term in abstract:
            score += ABSTRACT_WORD_POINTS

    if _DOMAIN_TOPIC_TERM in topic_lower and (
        ARCHITECTURE_TERM in title
        or _DOMAIN_TOPIC_TERM in title
        or ARCHITECTURE_TERM in abstract
    ):
        score += DOMAIN_BONUS

    if is_landmark(result):
        score += LANDMARK_BONUS

    return score


def score_results(results: list[RawResult], topic: str) -> list[ScoredCandidate]:
    """Score every result, preserving feed order."""
    return [ScoredCandidate(result=result, score=score_result(result, topic)) for result in results]


def rank_results(results: list[RawResult], topic: str, n: int) -> list[RawResult]:
    """Drop zero-score results, order by score (ties keep feed order), keep top n."""
    scored = [candidate for candidate in score_results(results, topic) if candidate.score > 0]
    scored.sort(key=lambda candidate: candidate.score, reverse=True)
    return [candidate.result for candidate in scored[: max(n, 0)]]


def ensure_landmark(ranked: list[RawResult], n: int) -> list[RawResult]:
    """Prepend the canonical landmark record unless it is already ranked.

    The result is re-truncated to n, so the landmark survives even at n=1
    and even when the feed returned nothing relevant.
    """
    if any(is_landmark(result) for result in ranked):
        return ranked[:n]
    return [LANDMARK_PAPER, *ranked][:n]
