"""Question answering about a single paper."""

from __future__ import annotations

import logging

from config import ASK_PARAMS
from errors import InputError
from llm_client import Generate, generate
from models import Paper

LOGGER = logging.getLogger(__name__)


def build_question_prompt(paper: Paper, question: str) -> str:
    return (
        "You are an expert research assistant. Based on the following research paper "
        "content, answer the user's question concisely and clearly.\n"
        f'Paper:\n"""{paper.best_text()}"""\n'
        f"Question: {question}\n"
        "Answer:"
    )


def answer_question(paper: Paper, question: str, *, generate_fn: Generate | None = None) -> str:
    """Answer a question using the paper's best available text as context."""
    if not isinstance(question, str) or not question.strip():
        raise InputError("Question is required")

    generate_fn = generate_fn or generate
    LOGGER.info("Answering question for paper_id=%s", paper.paper_id)
    answer = generate_fn(
        build_question_prompt(paper, question),
        ASK_PARAMS.max_tokens,
        ASK_PARAMS.temperature,
    )
    return answer.strip()
