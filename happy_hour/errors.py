"""
Error taxonomy for the search pipeline.

Every error carries a fixed `user_message`; the rendering layer only ever
sees that string, never the underlying diagnostic.

- ConfigurationError: credentials/configuration missing. Fatal for the session.
- EmptyResponse:      the service returned no text at all.
- ExtractionError:    no JSON array could be located, or it did not parse.
- MalformedRecord:    one record failed validation. Never escapes the normalizer.
- TransportError:     the service call itself failed.
"""

from __future__ import annotations

from .constants import (
    CONFIGURATION_ERROR_MESSAGE,
    EXTRACTION_ERROR_MESSAGE,
    NO_RESULTS_MESSAGE,
    TRANSPORT_ERROR_MESSAGE,
)


class HappyHourError(Exception):
    """Base class for pipeline errors."""

    user_message: str = TRANSPORT_ERROR_MESSAGE


class ConfigurationError(HappyHourError):
    user_message = CONFIGURATION_ERROR_MESSAGE


class EmptyResponse(HappyHourError):
    user_message = NO_RESULTS_MESSAGE


class ExtractionError(HappyHourError):
    user_message = EXTRACTION_ERROR_MESSAGE


class MalformedRecord(HappyHourError):
    user_message = EXTRACTION_ERROR_MESSAGE

    def __init__(self, index: int, reason: str) -> None:
        super().__init__(f"record {index}: {reason}")
        self.index = index
        self.reason = reason


class TransportError(HappyHourError):
    user_message = TRANSPORT_ERROR_MESSAGE


def user_message_for(exc: BaseException) -> str:
    """Map any exception to the single string shown in the UI."""
    if isinstance(exc, HappyHourError):
        return exc.user_message
    return TRANSPORT_ERROR_MESSAGE


__all__ = [
    "ConfigurationError",
    "EmptyResponse",
    "ExtractionError",
    "HappyHourError",
    "MalformedRecord",
    "TransportError",
    "user_message_for",
]
