from unittest.mock import MagicMock, patch

import openai
import pytest

from errors import GenerationError
from llm_client import generate, openai_generate


def _openai_response(content: str | None) -> MagicMock:
    mock_choice = MagicMock()
    mock_choice.message.content = content
    mock_response = MagicMock()
    mock_response.choices = [mock_choice]
    return mock_response


def test_openai_generate_passes_prompt_and_limits() -> None:
    mock_client = MagicMock()
    mock_client.chat.completions.create.return_value = _openai_response("A summary.")

    with patch("llm_client.OpenAI", return_value=mock_client) as mock_cls, \
         patch.dict("os.environ", {"OPENAI_API_KEY": "test-key"}):
        text = openai_generate("Summarize this", 400, 0.3)

    assert text == "A summary."
    kwargs = mock_client.chat.completions.create.call_args.kwargs
    assert kwargs["max_completion_tokens"] == 400
    assert kwargs["temperature"] == 0.3
    assert kwargs["messages"] == [{"role": "user", "content": "Summarize this"}]
    assert mock_cls.call_args.kwargs["timeout"] > 0


def test_openai_generate_raises_without_api_key() -> None:
    with patch.dict("os.environ", {}, clear=True):
        with pytest.raises(GenerationError, match="OPENAI_API_KEY"):
            openai_generate("p", 10, 0.1)


def test_openai_errors_become_generation_errors() -> None:
    mock_client = MagicMock()
    mock_client.chat.completions.create.side_effect = openai.OpenAIError("rate limited")

    with patch("llm_client.OpenAI", return_value=mock_client), \
         patch.dict("os.environ", {"OPENAI_API_KEY": "test-key"}):
        with pytest.raises(GenerationError):
            openai_generate("p", 10, 0.1)


def test_generate_dispatches_on_provider() -> None:
    with patch.dict("os.environ", {"LLM_PROVIDER": "cohere"}), \
         patch("cohere_client.cohere_generate", return_value=" from cohere ") as mock_cohere:
        assert generate("p", 10, 0.1) == "from cohere"
    mock_cohere.assert_called_once_with("p", 10, 0.1)

    with patch.dict("os.environ", {"LLM_PROVIDER": "anthropic"}), \
         patch("anthropic_client.claude_generate", return_value="from claude"):
        assert generate("p", 10, 0.1) == "from claude"


def test_generate_defaults_to_openai() -> None:
    with patch.dict("os.environ", {}, clear=True), \
         patch("llm_client.openai_generate", return_value="from openai") as mock_openai:
        assert generate("p", 10, 0.1) == "from openai"
    mock_openai.assert_called_once()


def test_generate_rejects_empty_reply() -> None:
    with patch.dict("os.environ", {"LLM_PROVIDER": "openai"}), \
         patch("llm_client.openai_generate", return_value="  "):
        with pytest.raises(GenerationError):
            generate("p", 10, 0.1)


def test_generate_rejects_unknown_provider() -> None:
    with patch.dict("os.environ", {"LLM_PROVIDER": "mystery"}):
        with pytest.raises(GenerationError, match="mystery"):
            generate("p", 10, 0.1)


def test_generation_error_is_a_runtime_error() -> None:
    assert issubclass(GenerationError, RuntimeError)
