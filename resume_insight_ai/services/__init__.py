"""Service exports."""

from .llm_gateway import LLMGateway
from .mood import apply_mood, apply_mood_to_report
from .pii_scanner import detect_pii
from .response_coercer import coerce_to_schema, parse_with_fallback, sanitize_llm_response

__all__ = [
    "LLMGateway",
    "apply_mood",
    "apply_mood_to_report",
    "detect_pii",
    "coerce_to_schema",
    "parse_with_fallback",
    "sanitize_llm_response",
]
