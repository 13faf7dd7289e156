"""Cohere generate API client."""

from __future__ import annotations

import logging
import os

import requests

from config import GENERATION_TIMEOUT_SECONDS
from errors import GenerationError

COHERE_API_URL = "https://api.cohere.ai/v1/generate"

LOGGER = logging.getLogger(__name__)


def cohere_generate(prompt: str, max_tokens: int, temperature: float) -> str:
    """Generate text from a prompt with Cohere and return the first generation."""
    api_key = os.getenv("COHERE_API_KEY")
    if not api_key:
        raise GenerationError("COHERE_API_KEY environment variable is required")

    payload = {
        "model": os.getenv("COHERE_MODEL", "command"),
        "prompt": prompt,
        "max_tokens": max_tokens,
        "temperature": temperature,
    }
    headers = {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
    }

    try:
        response = requests.post(
            COHERE_API_URL,
            headers=headers,
            json=payload,
            timeout=GENERATION_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
        body = response.json()
    except (requests.RequestException, ValueError) as exc:
        LOGGER.warning("Cohere call failed: %s", exc)
        raise GenerationError("Cohere API call failed") from exc

    try:
        return body["generations"][0]["text"]
    except (KeyError, IndexError, TypeError) as exc:
        raise GenerationError(f"Unexpected Cohere response shape: {body}") from exc
