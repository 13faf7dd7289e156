"""Runtime defaults consumed by the pipeline.

Environment-driven values are read lazily so that a ``.env`` file loaded by
``main()`` is honoured. Generation parameters are fixed per operation kind.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

FEED_TIMEOUT_SECONDS = 15
GENERATION_TIMEOUT_SECONDS = 60
_DEFAULT_MAX_RESULTS = 3


@dataclass(frozen=True, slots=True)
class GenerationParams:
    max_tokens: int
    temperature: float


SUMMARIZE_PARAMS = GenerationParams(max_tokens=400, temperature=0.3)
COMPARE_PARAMS = GenerationParams(max_tokens=1000, temperature=0.4)
ASK_PARAMS = GenerationParams(max_tokens=200, temperature=0.3)


def default_max_results() -> int:
    """Result count used when a caller does not pass one (DEFAULT_MAX_RESULTS)."""
    return int(os.getenv("DEFAULT_MAX_RESULTS", _DEFAULT_MAX_RESULTS))


def paper_store_path() -> str:
    return os.getenv("PAPER_STORE_PATH", "papers_store.csv")
