"""End-to-end operations: fetch, search, get, compare and ask."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from arxiv_feed import fetch_raw
from chat_history import NEW_SESSION_TITLE, append_exchange
from comparison import MIN_PAPERS, compare_papers
from config import default_max_results
from errors import InputError, NotFoundError
from models import Paper, RawResult
from paper_store import PaperStore
from qa import answer_question
from query_builder import build_query
from relevance import ensure_landmark, rank_results
from summarizer import summarize_papers

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class SearchResult:
    topic: str
    papers: list[Paper]
    ai_response: str


@dataclass(slots=True)
class Comparison:
    narrative: str
    papers: list[Paper]


def fetch_ranked(topic: str, max_results: int | None = None) -> list[RawResult]:
    """Fetch and rank feed results for a topic without persisting anything."""
    n = max_results if max_results is not None else default_max_results()
    query = build_query(topic, n)

    raw = fetch_raw(query)
    ranked = rank_results(raw, topic, n)
    LOGGER.info(
        "Relevance ranking: topic=%r fetched=%s kept=%s seed_fallback=%s",
        topic,
        len(raw),
        len(ranked),
        query.seed_fallback,
    )

    if query.seed_fallback:
        ranked = ensure_landmark(ranked, n)
    return ranked


def search_papers(
    topic: str,
    *,
    store: PaperStore,
    max_results: int | None = None,
    summarize: bool = True,
    user_id: str | None = None,
) -> SearchResult:
    """Run one full search: fetch, rank, persist, summarize, record in chat history.

    A feed failure fails the whole search. Summary failures are isolated per
    paper and never fail the search.
    """
    if not isinstance(topic, str) or not topic.strip():
        raise InputError("topic is required")
    topic = topic.strip()

    ranked = fetch_ranked(topic, max_results)
    saved = [store.upsert(candidate, topic) for candidate in ranked]

    papers = saved
    if summarize and saved:
        summarize_papers(saved, store=store)
        papers = store.find_by_ids([paper.paper_id for paper in saved])

    ai_response = format_search_response(topic, papers, summarized=summarize)

    if user_id:
        try:
            append_exchange(user_id, f"Find papers on {topic}", ai_response)
        except Exception as exc:
            LOGGER.warning("Chat history write failed (non-fatal): %s", exc)

    LOGGER.info("Search complete. topic=%r papers=%s", topic, len(papers))
    return SearchResult(topic=topic, papers=papers, ai_response=ai_response)


def format_search_response(topic: str, papers: list[Paper], *, summarized: bool) -> str:
    """Chat-history text describing a search result."""
    if not summarized:
        return f'Found {len(papers)} papers on "{topic}".'

    findings = "\n\n".join(
        f"**{paper.title}**\n{paper.ai_summary or paper.abstract_display}" for paper in papers
    )
    return (
        f'I found {len(papers)} research papers on "{topic}". '
        f"Here are the key findings:\n\n{findings}"
    )


def get_paper(paper_id: str, *, store: PaperStore) -> Paper:
    paper = store.get(paper_id)
    if paper is None:
        raise NotFoundError("Paper not found")
    return paper


def compare_selected(ids: list[str], *, store: PaperStore) -> Comparison:
    """Compare two or more persisted papers, in the order the ids were given."""
    if not isinstance(ids, list) or len(ids) < MIN_PAPERS:
        raise InputError(f"Provide a list of at least {MIN_PAPERS} paper ids")

    papers = store.find_by_ids(ids)
    if len(papers) < MIN_PAPERS:
        raise NotFoundError("Not enough papers found")

    narrative = compare_papers(papers)
    return Comparison(narrative=narrative, papers=papers)


def ask_paper(
    paper_id: str,
    question: str,
    *,
    store: PaperStore,
    user_id: str | None = None,
) -> str:
    """Answer a question about one persisted paper."""
    if not isinstance(question, str) or not question.strip():
        raise InputError("Question is required")

    paper = get_paper(paper_id, store=store)
    answer = answer_question(paper, question)

    if user_id:
        try:
            append_exchange(user_id, question, answer, title=NEW_SESSION_TITLE)
        except Exception as exc:
            LOGGER.warning("Chat history write failed (non-fatal): %s", exc)

    return answer
