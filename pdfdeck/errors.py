"""Exception types for the PDF-to-deck pipeline and the failure classifier."""

from __future__ import annotations

import re
from enum import Enum

_CREDENTIAL_STATUSES = {"UNAUTHENTICATED", "PERMISSION_DENIED"}
_UNAVAILABLE_STATUSES = {"UNAVAILABLE", "INTERNAL", "DEADLINE_EXCEEDED"}


class FailureKind(str, Enum):
    CREDENTIAL = "credential"
    INVALID_CONTENT = "invalid_content"
    UNAVAILABLE = "unavailable"
    UNKNOWN = "unknown"


class PipelineError(Exception):
    """Base class for every error raised by pdfdeck."""

    user_message = "Something went wrong."


class ConfigurationError(PipelineError):
    """Raised when the Gemini credential is missing or the client cannot be built."""

    user_message = "API Key is missing from environment. Please configure GEMINI_API_KEY."

    def __init__(self, message: str | None = None):
        super().__init__(message or self.user_message)
        if message:
            self.user_message = f"Gemini client is misconfigured: {message}"


class InvalidDocumentError(PipelineError, ValueError):
    """Raised when an upload is not a usable PDF."""

    user_message = "Please upload a valid PDF file."

    def __init__(self, message: str | None = None):
        super().__init__(message or self.user_message)


class ExportError(PipelineError):
    """Raised when the PPTX file could not be assembled or written."""

    user_message = "Failed to generate PPTX file."


class GenerationError(PipelineError):
    """Outline generation failed.

    ``kind`` says how the failure was classified and drives the message
    shown to the user; ``model`` is the model the failing attempt used.
    """

    def __init__(self, message: str, *, kind: FailureKind = FailureKind.UNKNOWN, model: str | None = None):
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.model = model

    @classmethod
    def from_exception(cls, exc: Exception, *, model: str | None = None) -> "GenerationError":
        if isinstance(exc, GenerationError):
            if exc.model is None:
                exc.model = model
            return exc
        message = str(exc) or type(exc).__name__
        err = cls(message, kind=classify_failure(exc), model=model)
        err.__cause__ = exc
        return err

    @property
    def user_message(self) -> str:  # type: ignore[override]
        if self.kind is FailureKind.CREDENTIAL:
            return "Invalid API Key. Please check your configuration."
        if self.kind is FailureKind.INVALID_CONTENT:
            return "The PDF content could not be processed. It might be too large or corrupted."
        if self.kind is FailureKind.UNAVAILABLE:
            return "Gemini service is temporarily unavailable. Please try again later."
        return f"Generation failed: {self.message}"


def classify_failure(exc: BaseException) -> FailureKind:
    """Classify a failed Gemini call.

    Uses the ``code``/``status`` attributes of ``google.genai.errors.APIError``
    when present and falls back to matching the error text. A credential
    problem outranks every other signal.
    """
    if isinstance(exc, GenerationError):
        return exc.kind

    code = getattr(exc, "code", None)
    if not isinstance(code, int):
        code = None
    status = str(getattr(exc, "status", None) or "").upper()
    text = str(exc)

    if code in (401, 403) or status in _CREDENTIAL_STATUSES or "api key" in text.lower():
        return FailureKind.CREDENTIAL
    if code is not None:
        if code in (400, 413) or status == "INVALID_ARGUMENT":
            return FailureKind.INVALID_CONTENT
        if code >= 500 or status in _UNAVAILABLE_STATUSES:
            return FailureKind.UNAVAILABLE
        return FailureKind.UNKNOWN

    if re.search(r"\b400\b", text):
        return FailureKind.INVALID_CONTENT
    if re.search(r"\b50[03]\b", text):
        return FailureKind.UNAVAILABLE
    return FailureKind.UNKNOWN
