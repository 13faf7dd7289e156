"""arXiv search feed ingestion helpers."""

from __future__ import annotations

import logging
import re
from datetime import UTC, datetime

import feedparser
import requests

from config import FEED_TIMEOUT_SECONDS
from errors import FetchError
from models import RawResult, SearchQuery

# Public arXiv export API; returns an Atom feed.
ARXIV_API_URL = "http://export.arxiv.org/api/query"

_VERSION_SUFFIX = re.compile(r"v\d+$")

LOGGER = logging.getLogger(__name__)


def fetch_raw(query: SearchQuery) -> list[RawResult]:
    """Fetch up to ``query.fetch_limit`` raw results for a structured query.

    Raises FetchError on network failure, non-2xx status or a payload that is
    not a feed. No retry happens at this layer.
    """
    params = {
        "search_query": query.expression,
        "start": 0,
        "max_results": query.fetch_limit,
        "sortBy": "relevance",
        "sortOrder": "descending",
    }

    try:
        response = requests.get(ARXIV_API_URL, params=params, timeout=FEED_TIMEOUT_SECONDS)
        response.raise_for_status()
    except requests.RequestException as exc:
        LOGGER.error("arXiv fetch failed for query=%r: %s", query.expression, exc)
        raise FetchError("Failed to fetch from arXiv") from exc

    results = _parse_feed_payload(response.content)
    LOGGER.info(
        "arXiv fetch: query=%r limit=%s returned=%s",
        query.expression,
        query.fetch_limit,
        len(results),
    )
    return results


def _parse_feed_payload(payload: str | bytes) -> list[RawResult]:
    """Parse an Atom document into RawResult objects, in feed order."""
    feed = feedparser.parse(payload)
    # An empty result set is still a recognised Atom document.
    if feed.bozo and not feed.entries and not feed.get("version"):
        raise FetchError("Unparseable arXiv response") from feed.get("bozo_exception")

    parsed: list[RawResult] = []
    for entry in feed.entries:
        source_url = (entry.get("id") or "").strip()
        title = _collapse(entry.get("title") or "")
        if not title:
            continue

        authors = tuple(
            name
            for name in ((author.get("name") or "").strip() for author in entry.get("authors", []))
            if name
        )

        parsed.append(
            RawResult(
                external_id=_external_id(source_url),
                title=title,
                abstract=(entry.get("summary") or "").strip(),
                authors=authors,
                published_at=_parse_datetime(entry.get("published_parsed")),
                pdf_url=_pdf_link(entry),
                source_url=source_url,
            )
        )

    return parsed


def _external_id(source_url: str) -> str | None:
    # http://arxiv.org/abs/2501.12345v2 -> 2501.12345; the version never
    # takes part in identity, so revisions update the same record.
    if "/abs/" in source_url:
        raw = source_url.split("/abs/", 1)[1]
    else:
        raw = source_url.rsplit("/", 1)[-1]
    return _VERSION_SUFFIX.sub("", raw) or None


def _pdf_link(entry: feedparser.FeedParserDict) -> str:
    for link in entry.get("links", []):
        if link.get("type") == "application/pdf" or link.get("title") == "pdf":
            return link.get("href", "")
    return ""


def _parse_datetime(parsed: tuple | None) -> datetime | None:
    # feedparser normalizes feed timestamps to a UTC struct_time.
    if not parsed:
        return None
    return datetime(*parsed[:6], tzinfo=UTC)


def _collapse(value: str) -> str:
    return " ".join(value.split())
