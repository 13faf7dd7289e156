from unittest.mock import MagicMock

import pytest

from comparison import build_comparison_prompt, compare_papers
from errors import GenerationError, NotFoundError
from models import Paper


def _paper(paper_id: str, title: str, summary: str | None = None, abstract: str = "") -> Paper:
    return Paper(
        paper_id=paper_id,
        topic="t",
        external_id=paper_id,
        title=title,
        abstract_raw=abstract,
        abstract_display=abstract,
        ai_summary=summary,
    )


def test_prompt_numbers_papers_in_input_order_with_best_text() -> None:
    papers = [
        _paper("b", "Second Title", summary="AI summary B", abstract="raw B"),
        _paper("a", "First Title", abstract="raw A"),
    ]

    prompt = build_comparison_prompt(papers)

    assert "1. Title: Second Title\nSummary: AI summary B" in prompt
    assert "2. Title: First Title\nSummary: raw A" in prompt
    assert prompt.index("Second Title") < prompt.index("First Title")
    assert "**Overview:**" in prompt
    assert "**Synthesis:**" in prompt


def test_compare_makes_one_call_and_returns_text_verbatim() -> None:
    narrative = "**Overview:**\nBoth papers...\n\n**Synthesis:**\nTogether..."
    fake = MagicMock(return_value=narrative)

    result = compare_papers([_paper("a", "A", abstract="x"), _paper("b", "B", abstract="y")], generate_fn=fake)

    assert result == narrative
    fake.assert_called_once()
    _, max_tokens, temperature = fake.call_args.args
    assert max_tokens == 1000
    assert temperature == 0.4


@pytest.mark.parametrize("count", [0, 1])
def test_fewer_than_two_papers_makes_no_call(count: int) -> None:
    fake = MagicMock()
    with pytest.raises(NotFoundError):
        compare_papers([_paper(str(i), "T") for i in range(count)], generate_fn=fake)
    fake.assert_not_called()


def test_generation_error_propagates() -> None:
    fake = MagicMock(side_effect=GenerationError("down"))
    with pytest.raises(GenerationError):
        compare_papers([_paper("a", "A"), _paper("b", "B")], generate_fn=fake)
