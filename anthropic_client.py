"""Thin wrapper around the Anthropic Messages API."""

from __future__ import annotations

import logging
import os

import anthropic

from config import GENERATION_TIMEOUT_SECONDS
from errors import GenerationError

LOGGER = logging.getLogger(__name__)


def claude_generate(prompt: str, max_tokens: int, temperature: float) -> str:
    """Call the Claude API with a single user prompt and return the reply text.

    Args:
        prompt: Full prompt text, sent as one user message.
        max_tokens: Hard cap on output tokens.
        temperature: Sampling temperature.
    """
    api_key = os.getenv("ANTHROPIC_API_KEY")
    if not api_key:
        raise GenerationError("ANTHROPIC_API_KEY environment variable is required")

    claude_model = os.getenv("CLAUDE_MODEL", "claude-sonnet-4-5")
    client = anthropic.Anthropic(
        api_key=api_key,
        timeout=GENERATION_TIMEOUT_SECONDS,
        max_retries=0,
    )

    LOGGER.debug("Calling Claude model=%s max_tokens=%s", claude_model, max_tokens)
    try:
        response = client.messages.create(
            model=claude_model,
            max_tokens=max_tokens,
            temperature=temperature,
            messages=[{"role": "user", "content": prompt}],
        )
    except anthropic.AnthropicError as exc:
        LOGGER.warning("Claude call failed: %s", exc)
        raise GenerationError("Claude API call failed") from exc

    parts = [block.text for block in response.content if getattr(block, "type", "") == "text"]
    return "".join(parts)
