"""
Error taxonomy shared by every feature.

``str(exc)`` is always the message that may be shown to the end user.
Diagnostic detail (raw model output, missing fields, ...) lives in
attributes and is only ever written to the log.
"""

from __future__ import annotations


class ToolsHubError(Exception):
    """Base for all errors surfaced through the API."""

    status_code: int = 500


class NotAuthenticatedError(ToolsHubError):
    """No active user session for a token or history operation."""

    status_code = 401

    def __init__(self, message: str = "Not authenticated") -> None:
        super().__init__(message)


class TokenMissingError(ToolsHubError):
    """No GitHub token on record for the user."""

    status_code = 400

    def __init__(self, message: str = "GitHub token not found") -> None:
        super().__init__(message)


class InputValidationError(ToolsHubError):
    """Bad user input, caught before any network call."""

    status_code = 400


class UpstreamRequestFailedError(ToolsHubError):
    """GitHub API call returned non-2xx or could not be completed."""

    status_code = 502


class RateLimitError(UpstreamRequestFailedError):
    """403/429 — GitHub rate limit exceeded."""

    status_code = 429

    def __init__(self, message: str, reset_timestamp: int | None = None):
        super().__init__(message)
        self.reset_timestamp = reset_timestamp


class GenerationFailedError(ToolsHubError):
    """The generation client call itself failed."""

    status_code = 502


class PersistenceError(ToolsHubError):
    """A write to the persistence store failed."""

    status_code = 500


class ResponseFormatError(ToolsHubError):
    """Model output could not be turned into a validated result."""

    status_code = 502

    def __init__(self, label: str, raw_text: str, cleaned_text: str) -> None:
        super().__init__(f"Failed to parse {label} data. Please try again.")
        self.label = label
        self.raw_text = raw_text
        self.cleaned_text = cleaned_text

    def diagnostics(self) -> dict[str, object]:
        """Fields attached to the log record, never to the response."""
        return {
            "feature": self.label,
            "raw_text": self.raw_text,
            "cleaned_text": self.cleaned_text,
        }


class MalformedResponseError(ResponseFormatError):
    """Cleaned model output is not valid JSON."""


class InvalidShapeError(ResponseFormatError):
    """Parsed JSON lacks one or more required fields."""

    def __init__(
        self,
        label: str,
        missing_fields: list[str],
        raw_text: str,
        cleaned_text: str,
    ) -> None:
        super().__init__(label, raw_text, cleaned_text)
        self.missing_fields = missing_fields

    def diagnostics(self) -> dict[str, object]:
        details = super().diagnostics()
        details["missing_fields"] = self.missing_fields
        return details
