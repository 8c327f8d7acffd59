"""Typed errors surfaced to the caller (extraction, content and transport failures)."""

from enum import Enum
from typing import Optional

from resume_insight_ai.config import KEY_MODE_OWN, KEY_MODE_PROVIDED


class ResumeAnalysisError(Exception):
    """Base class for every error the analysis pipeline surfaces to the user."""

    guidance: str = ""

    def user_message(self) -> str:
        """Message plus remediation hint, ready for display."""
        message = str(self)
        if self.guidance:
            return f"{message}\n\nTip: {self.guidance}"
        return message


class ExtractionErrorKind(str, Enum):
    UNSUPPORTED_FORMAT = "unsupported_format"
    CORRUPT_FILE = "corrupt_file"
    EMPTY_CONTENT = "empty_content"
    OCR_FAILURE = "ocr_failure"


_EXTRACTION_GUIDANCE = {
    ExtractionErrorKind.UNSUPPORTED_FORMAT: "Upload the resume as PDF, DOCX or plain text.",
    ExtractionErrorKind.CORRUPT_FILE: (
        "The file could not be opened. Re-export it (e.g. save as .docx or PDF) and try again."
    ),
    ExtractionErrorKind.EMPTY_CONTENT: (
        "Make sure the resume contains readable text (not just images) and is not "
        "password-protected, or try a different format such as .docx or .txt."
    ),
    ExtractionErrorKind.OCR_FAILURE: (
        "The PDF looks scanned and text recognition failed. Upload a text-based PDF or a .docx file."
    ),
}


class ExtractionError(ResumeAnalysisError):
    """Text could not be extracted from the uploaded document."""

    def __init__(
        self,
        kind: ExtractionErrorKind,
        message: str,
        strategy: str = "",
        char_count: int = 0,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.strategy = strategy
        self.char_count = char_count
        self.guidance = _EXTRACTION_GUIDANCE[kind]


class ContentTooShortError(ResumeAnalysisError):
    """Resume text is below the minimum content threshold."""

    guidance = "Ensure the resume has enough readable content to analyze."

    def __init__(self, char_count: int, minimum: int) -> None:
        super().__init__(
            f"Resume text is too short or empty ({char_count} characters, at least {minimum} required)."
        )
        self.char_count = char_count
        self.minimum = minimum


class TransportError(ResumeAnalysisError):
    """Failure talking to the LLM provider."""

    _guidance_by_mode = {
        KEY_MODE_PROVIDED: "Please try again later.",
        KEY_MODE_OWN: "Please try again later.",
    }

    def __init__(self, message: str, key_mode: str = KEY_MODE_PROVIDED, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.key_mode = key_mode
        self.status_code = status_code
        self.guidance = self._guidance_by_mode.get(key_mode, "")


class AuthError(TransportError):
    _guidance_by_mode = {
        KEY_MODE_PROVIDED: "The built-in API key was rejected. Switch to using your own API key.",
        KEY_MODE_OWN: "Check your API key, or switch back to the provided key.",
    }


class RateLimitExceeded(TransportError):
    _guidance_by_mode = {
        KEY_MODE_PROVIDED: "The shared key is busy. Wait a few minutes or supply your own API key.",
        KEY_MODE_OWN: "Your key hit its rate limit. Wait a few minutes and try again.",
    }


class ServerError(TransportError):
    _guidance_by_mode = {
        KEY_MODE_PROVIDED: "The LLM provider is having an outage. Please try again later.",
        KEY_MODE_OWN: "The LLM provider is having an outage. Please try again later.",
    }


class NetworkError(TransportError):
    _guidance_by_mode = {
        KEY_MODE_PROVIDED: "Check your internet connection and try again.",
        KEY_MODE_OWN: "Check your internet connection and try again.",
    }


class AnalysisFailed(ResumeAnalysisError):
    """Unexpected failure during analysis; the original exception is the cause."""

    guidance = "Please try again, or upload the resume in a different file format."

    def __init__(self, cause: BaseException) -> None:
        super().__init__(f"Resume analysis failed: {cause}")
        self.cause = cause
