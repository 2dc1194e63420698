"""Error taxonomy for the generation pipeline.

Every failure a request can hit is one of these. The HTTP layer turns them
into ``{"error": ..., "details": ...}`` bodies via ``to_payload``; the CLI
prints the same payload.
"""

from __future__ import annotations

from typing import Any, Optional


class StudyAidError(Exception):
    """Base class for failures surfaced to the caller."""

    status_code: int = 500

    def __init__(self, message: str, *, details: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class InvalidRequest(StudyAidError):
    """Required input missing or malformed; no downstream call was made."""

    status_code = 400


class UpstreamFailure(StudyAidError):
    """The LLM call itself failed (network, auth, rate limit, ...)."""


class EmptyModelOutput(UpstreamFailure):
    """The model answered with no usable content."""


class UnparsableStructuredOutput(StudyAidError):
    """Flashcards output was not a JSON array even after self-correction."""

    def __init__(
        self,
        message: str,
        *,
        raw: str,
        original_raw: Optional[str] = None,
        details: Optional[str] = None,
    ) -> None:
        super().__init__(message, details=details)
        self.raw = raw
        self.original_raw = original_raw

    def to_payload(self) -> dict[str, Any]:
        payload = super().to_payload()
        payload["raw"] = self.raw
        if self.original_raw is not None and self.original_raw != self.raw:
            payload["originalRaw"] = self.original_raw
        return payload
