"""The landmark paper: a canonical record guaranteed to surface for its queries."""

from __future__ import annotations

from datetime import UTC, datetime

from models import RawResult

LANDMARK_TITLE = "attention is all you need"
LANDMARK_AUTHOR_SURNAME = "vaswani"
ARCHITECTURE_TERM = "transformer"

# Topic keywords (lower case) that put a search in the landmark domain.
_TOPIC_SYNONYMS: frozenset[str] = frozenset({
    LANDMARK_TITLE,
    ARCHITECTURE_TERM,
    LANDMARK_AUTHOR_SURNAME,
    "attention mechanism",
})

LANDMARK_PAPER = RawResult(
    external_id="1706.03762",
    title="Attention Is All You Need",
    abstract=(
        "The dominant sequence transduction models are based on complex recurrent or "
        "convolutional neural networks in an encoder-decoder configuration. The best "
        "performing models also connect the encoder and decoder through an attention "
        "mechanism. We propose a new simple network architecture, the Transformer, based "
        "solely on attention mechanisms, dispensing with recurrence and convolutions "
        "entirely. Experiments on two machine translation tasks show that these models are "
        "superior in quality while being more parallelizable and requiring significantly "
        "less time to train. Our model achieves 28.4 BLEU on the WMT 2014 English-to-German "
        "translation task, improving over the existing best results, including ensembles, "
        "by over 2 BLEU. On the WMT 2014 English-to-French translation task, our model "
        "establishes a new single-model state-of-the-art BLEU score of 41.8 after training "
        "for 3.5 days on eight GPUs, a small fraction of the training costs of the best "
        "models from the literature. We show that the Transformer generalizes well to other "
        "tasks by applying it successfully to English constituency parsing with large "
        "amounts of training data."
    ),
    authors=(
        "Ashish Vaswani",
        "Noam Shazeer",
        "Niki Parmar",
        "Jakob Uszkoreit",
        "Llion Jones",
        "Aidan N. Gomez",
        "Łukasz Kaiser",
        "Illia Polosukhin",
    ),
    published_at=datetime(2017, 6, 12, tzinfo=UTC),
    pdf_url="https://arxiv.org/pdf/1706.03762.pdf",
    source_url="https://arxiv.org/abs/1706.03762",
)


def topic_in_landmark_domain(topic: str) -> bool:
    """Return True if the topic names the landmark paper, its author or its domain."""
    normalized = topic.lower()
    return any(term in normalized for term in _TOPIC_SYNONYMS)


def is_landmark(result: RawResult) -> bool:
    """Return True if the result is the landmark paper (by title or author)."""
    if LANDMARK_TITLE in result.title.lower():
        return True
    return any(LANDMARK_AUTHOR_SURNAME in author.lower() for author in result.authors)
