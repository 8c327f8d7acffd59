"""Recover a validated JSON value from free-form LLM output, or fall back to a safe default."""

import json
import logging
import re
from functools import lru_cache
from typing import Any, Callable, Optional, TypeVar

from pydantic import TypeAdapter, ValidationError

from resume_insight_ai.utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

Validator = Callable[[Any], bool]

_SANITIZE_RULES = [
    (re.compile(r"\*\*(.*?)\*\*"), r"\1"),  # **bold**
    (re.compile(r"\*(.*?)\*"), r"\1"),  # *italic*
    (re.compile(r"\\n"), ""),  # literal escaped newlines
    (re.compile(r"[“”]"), '"'),
    (re.compile(r"[‘’]"), "'"),
    (re.compile(r"```json\s*"), ""),
    (re.compile(r"```\s*$"), ""),
    (re.compile(r"^\s*```.*$", re.MULTILINE), ""),
]


def sanitize_llm_response(raw: str) -> str:
    """Strip markdown emphasis, escaped newlines, smart quotes and code fences."""
    text = raw or ""
    for pattern, replacement in _SANITIZE_RULES:
        text = pattern.sub(replacement, text)
    return text.strip()


def extract_json_text(response: str) -> Optional[str]:
    """
    Locate the candidate JSON substring: first '{' .. last '}' or first '[' .. last ']',
    whichever opening delimiter comes first. Returns None when no delimiter pair exists.
    """
    cleaned = sanitize_llm_response(response)

    object_start = cleaned.find("{")
    object_end = cleaned.rfind("}") + 1
    array_start = cleaned.find("[")
    array_end = cleaned.rfind("]") + 1

    if object_start != -1 and (array_start == -1 or object_start < array_start):
        start, end = object_start, object_end
    elif array_start != -1:
        start, end = array_start, array_end
    else:
        return None

    if end <= start:
        return None
    return cleaned[start:end]


def parse_with_fallback(
    raw_text: str,
    fallback_value: T,
    validator: Optional[Validator] = None,
    log: Optional[logging.Logger] = None,
) -> T:
    """
    Parse the first JSON value found in ``raw_text``.

    Returns the parsed value only if it parses and, when given, satisfies ``validator``.
    Anything else (no JSON, malformed JSON, shape mismatch, a validator that raises)
    returns ``fallback_value`` unchanged. Never raises.
    """
    log = log or logger
    json_text = extract_json_text(raw_text)
    if json_text is None:
        log.warning("No JSON found in LLM response; using fallback (response=%r)", (raw_text or "")[:200])
        return fallback_value
    try:
        parsed = json.loads(json_text)
    except (ValueError, RecursionError) as e:
        log.warning("LLM JSON parsing failed: %s; using fallback", e)
        return fallback_value
    try:
        accepted = validator(parsed) if validator else True
    except Exception as e:
        log.warning("Validator raised %s; using fallback", e)
        return fallback_value
    if not accepted:
        log.warning("Parsed JSON failed validation; using fallback (value=%r)", str(parsed)[:200])
        return fallback_value
    return parsed


@lru_cache(maxsize=None)
def _adapter(schema: Any) -> TypeAdapter:
    return TypeAdapter(schema)


def schema_validator(schema: Any) -> Validator:
    """Predicate accepting exactly the values that validate strictly against ``schema``."""
    adapter = _adapter(schema)

    def _validate(obj: Any) -> bool:
        try:
            adapter.validate_python(obj, strict=True)
        except ValidationError:
            return False
        return True

    return _validate


def coerce_to_schema(
    raw_text: str,
    schema: Any,
    fallback: T,
    log: Optional[logging.Logger] = None,
) -> T:
    """
    Coerce LLM output into an instance of ``schema`` (a pydantic model or any type
    pydantic can validate, e.g. ``List[str]``). Always returns a value of that shape.
    """
    parsed = parse_with_fallback(raw_text, fallback, schema_validator(schema), log=log)
    if parsed is fallback:
        return fallback
    return _adapter(schema).validate_python(parsed, strict=True)
