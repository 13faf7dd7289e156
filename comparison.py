"""Cross-paper comparison narrative from a single generative call."""

from __future__ import annotations

import logging

from config import COMPARE_PARAMS
from errors import NotFoundError
from llm_client import Generate, generate
from models import Paper

LOGGER = logging.getLogger(__name__)

MIN_PAPERS = 2

_COMPARE_INSTRUCTIONS = """You are an expert research analyst. Compare these research papers and provide a comprehensive analysis in a natural, conversational tone.

Structure your response as follows:

**Overview:**
Provide a 2-3 sentence overview of how these papers relate to each other and their collective contribution to the field.

**Key Differences:**

For each paper, discuss:
- **Research Focus:** What specific aspect or problem does this paper address?
- **Methodology:** How did the researchers approach their study?
- **Key Findings:** What were the main results or insights?
- **Contributions:** What does this work add to the field?

**Synthesis:**
End with 2-3 sentences that synthesize the papers and highlight their complementary or contrasting perspectives.

Write in a clear, engaging style that would be helpful for someone trying to understand these papers. Avoid technical jargon when possible, and make the comparison accessible."""


def build_comparison_prompt(papers: list[Paper]) -> str:
    parts = [
        f"{index}. Title: {paper.title}\nSummary: {paper.best_text()}"
        for index, paper in enumerate(papers, start=1)
    ]
    return f"{_COMPARE_INSTRUCTIONS}\n\nPapers to compare:\n" + "\n\n".join(parts)


def compare_papers(papers: list[Paper], *, generate_fn: Generate | None = None) -> str:
    """Return the model's comparison narrative for two or more papers.

    The narrative is returned as produced. Any generation error propagates:
    a comparison either succeeds as a whole or fails.
    """
    if len(papers) < MIN_PAPERS:
        raise NotFoundError(f"Not enough papers found: need at least {MIN_PAPERS}")

    generate_fn = generate_fn or generate
    prompt = build_comparison_prompt(papers)

    LOGGER.info("Comparing %s papers: %s", len(papers), [paper.paper_id for paper in papers])
    narrative = generate_fn(prompt, COMPARE_PARAMS.max_tokens, COMPARE_PARAMS.temperature)
    return narrative.strip()
