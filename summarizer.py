"""Sequential AI summarization of persisted papers with per-paper isolation."""

from __future__ import annotations

import logging
import threading
from datetime import UTC, datetime

from config import SUMMARIZE_PARAMS
from errors import GenerationError
from llm_client import Generate, generate
from models import Paper
from paper_store import PaperStore
from summary_cache import needs_summary

LOGGER = logging.getLogger(__name__)

# One summary call at a time across the process, whatever the caller's threading.
_GENERATION_SLOT = threading.Lock()

SUMMARY_PROMPT_TEMPLATE = """You are an expert research analyst. Summarize the following research paper in a clear, natural language format. Focus on the key points and make it easy to understand.

Write a concise summary that includes:
- What the research is about
- The main problem or question being addressed
- The approach or methodology used
- Key findings or results
- Any important limitations or future work

Keep it conversational and easy to read, like you're explaining it to someone who wants to understand the research quickly.

Research paper text:
\"\"\"{text}\"\"\"

Summary:"""


def build_summary_prompt(text: str) -> str:
    return SUMMARY_PROMPT_TEMPLATE.format(text=text)


def summarize_papers(
    papers: list[Paper],
    *,
    store: PaperStore,
    generate_fn: Generate | None = None,
    now: datetime | None = None,
) -> list[Paper]:
    """Summarize every paper whose cached summary is missing or stale.

    Papers are processed strictly one after another. A failure on one paper
    is logged and leaves that paper untouched; the batch always completes.
    Changed summaries are written back to the store after the loop; a failed
    write is logged and skipped the same way.

    Returns the input papers in order, with refreshed summaries where
    generation succeeded.
    """
    generate_fn = generate_fn or generate
    now = now or datetime.now(UTC)

    changed: list[Paper] = []
    failed = 0
    skipped = 0

    for paper in papers:
        if not needs_summary(paper, now):
            skipped += 1
            continue

        source_text = paper.abstract_raw or paper.abstract_display
        prompt = build_summary_prompt(source_text)
        try:
            with _GENERATION_SLOT:
                summary = generate_fn(
                    prompt,
                    SUMMARIZE_PARAMS.max_tokens,
                    SUMMARIZE_PARAMS.temperature,
                )
            summary = summary.strip() if isinstance(summary, str) else ""
            if not summary:
                raise GenerationError("empty summary returned")
        except Exception as exc:  # broad so one paper never aborts the batch
            failed += 1
            LOGGER.warning("Summarize failed for paper_id=%s (%s): %s", paper.paper_id, paper.title, exc)
            continue

        paper.ai_summary = summary
        paper.ai_summary_at = now
        changed.append(paper)
        LOGGER.info("Summarized paper_id=%s", paper.paper_id)

    saved = 0
    for paper in changed:
        try:
            store.save_summary(paper.paper_id, paper.ai_summary, paper.ai_summary_at)
        except Exception as exc:  # one lost write never aborts the rest
            failed += 1
            LOGGER.warning("Saving summary failed for paper_id=%s (%s): %s", paper.paper_id, paper.title, exc)
            continue
        saved += 1

    LOGGER.info(
        "Summarization complete. summarized=%s skipped=%s failed=%s",
        saved,
        skipped,
        failed,
    )
    return papers
