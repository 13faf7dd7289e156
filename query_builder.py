"""Translate a free-text topic into an arXiv search expression."""

from __future__ import annotations

import logging

from errors import InputError
from landmark import topic_in_landmark_domain
from models import SearchQuery

LOGGER = logging.getLogger(__name__)

# The feed's own relevance order is unreliable for short queries, so fetch
# extra candidates and let the scorer pick.
OVER_FETCH_FACTOR = 3

LANDMARK_EXPRESSION = (
    'ti:"attention is all you need" OR ti:transformer OR au:vaswani '
    'OR all:"attention mechanism" OR all:"self attention"'
)

_MODEL_ABBREVIATIONS: frozenset[str] = frozenset({
    "bert",
    "gpt",
})


def build_query(topic: str, max_results: int) -> SearchQuery:
    """Build the feed query for a topic.

    Landmark-domain topics get a fixed disjunction over title, author and
    abstract phrases and set ``seed_fallback``. Model abbreviations search
    title or all fields; anything else searches title or abstract.
    """
    if not isinstance(topic, str) or not topic.strip():
        raise InputError("topic is required")
    if max_results < 1:
        raise InputError("maxResults must be a positive integer")

    topic = topic.strip()
    normalized = topic.lower()

    if topic_in_landmark_domain(topic):
        expression = LANDMARK_EXPRESSION
        seed_fallback = True
    elif any(abbr in normalized for abbr in _MODEL_ABBREVIATIONS):
        expression = f"ti:{topic} OR all:{topic}"
        seed_fallback = False
    else:
        expression = f"ti:{topic} OR abs:{topic}"
        seed_fallback = False

    query = SearchQuery(
        expression=expression,
        seed_fallback=seed_fallback,
        fetch_limit=max_results * OVER_FETCH_FACTOR,
    )
    LOGGER.debug("Built query for topic=%r: %s (seed_fallback=%s)", topic, expression, seed_fallback)
    return query
