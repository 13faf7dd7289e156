"""Error taxonomy shared by the search, compare and ask operations."""

from __future__ import annotations


class PaperBotError(RuntimeError):
    """Base class for every error raised by the pipeline."""


class InputError(PaperBotError):
    """Missing or invalid topic, question or paper-id list."""


class FetchError(PaperBotError):
    """The literature feed was unreachable or returned something unparseable."""


class GenerationError(PaperBotError):
    """The generative text service failed, timed out or returned nothing."""


class NotFoundError(PaperBotError):
    """Requested paper id(s) do not resolve to enough persisted records."""


_RETRY_LATER_MESSAGES: dict[type[PaperBotError], str] = {
    FetchError: "Could not reach the paper search service. Please try again later.",
    GenerationError: "The AI service is unavailable right now. Please try again later.",
}


def user_message(exc: Exception) -> str:
    """Map an exception to the text shown to the user.

    Input and not-found errors carry a message the caller can act on. Upstream
    failures are reported generically so internal detail never leaks.
    """
    if isinstance(exc, (InputError, NotFoundError)):
        return str(exc)
    for kind, message in _RETRY_LATER_MESSAGES.items():
        if isinstance(exc, kind):
            return message
    return "Something went wrong. Please try again later."
