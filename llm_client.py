"""Generative text service: one call contract, several providers.

Every caller goes through ``generate(prompt, max_tokens, temperature)``. The
provider is picked with LLM_PROVIDER (openai, anthropic or cohere).
"""

from __future__ import annotations

import logging
import os
from typing import Callable

import openai
from openai import OpenAI

from config import GENERATION_TIMEOUT_SECONDS
from errors import GenerationError

LOGGER = logging.getLogger(__name__)

Generate = Callable[[str, int, float], str]

DEFAULT_PROVIDER = "openai"


def generate(prompt: str, max_tokens: int, temperature: float) -> str:
    """Run one completion with the configured provider and return its text.

    Raises GenerationError on any provider failure, timeout or empty reply.
    Nothing is retried here.
    """
    provider = os.getenv("LLM_PROVIDER", DEFAULT_PROVIDER).strip().lower()

    if provider == "openai":
        text = openai_generate(prompt, max_tokens, temperature)
    elif provider == "anthropic":
        from anthropic_client import claude_generate  # noqa: PLC0415

        text = claude_generate(prompt, max_tokens, temperature)
    elif provider == "cohere":
        from cohere_client import cohere_generate  # noqa: PLC0415

        text = cohere_generate(prompt, max_tokens, temperature)
    else:
        raise GenerationError(f"Unknown LLM_PROVIDER: {provider}")

    text = text.strip() if isinstance(text, str) else ""
    if not text:
        raise GenerationError(f"{provider} returned an empty response")
    return text


def openai_generate(prompt: str, max_tokens: int, temperature: float) -> str:
    """Single-turn chat completion against the OpenAI API."""
    api_key = os.getenv("OPENAI_API_KEY")
    if not api_key:
        raise GenerationError("OPENAI_API_KEY environment variable is required")

    model = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
    client = OpenAI(api_key=api_key, timeout=GENERATION_TIMEOUT_SECONDS, max_retries=0)

    LOGGER.debug("Calling OpenAI model=%s max_tokens=%s", model, max_tokens)
    try:
        response = client.chat.completions.create(
            model=model,
            temperature=temperature,
            max_completion_tokens=max_tokens,
            messages=[{"role": "user", "content": prompt}],
        )
    except openai.OpenAIError as exc:
        LOGGER.warning("OpenAI call failed: %s", exc)
        raise GenerationError("OpenAI API call failed") from exc

    try:
        return response.choices[0].message.content or ""
    except (AttributeError, IndexError) as exc:
        raise GenerationError("Unexpected OpenAI response shape") from exc
