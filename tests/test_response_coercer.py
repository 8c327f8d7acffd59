from typing import List

import pytest

from resume_insight_ai.schemas.analysis import RoleResult
from resume_insight_ai.services.response_coercer import (
    coerce_to_schema,
    extract_json_text,
    parse_with_fallback,
    sanitize_llm_response,
    schema_validator,
)

ROLE_FALLBACK = RoleResult(detected_role="Unknown", confidence=0, alternative_roles=[], reasoning="Analysis failed")


def test_fenced_json_with_preamble_is_recovered():
    raw = 'Here you go:\n```json\n{"detectedRole":"Backend Engineer","confidence":90,"alternativeRoles":[]}\n```'
    result = coerce_to_schema(raw, RoleResult, ROLE_FALLBACK)
    assert result is not ROLE_FALLBACK
    assert result.detected_role == "Backend Engineer"
    assert result.confidence == 90
    assert result.alternative_roles == []
    assert result.to_wire()["detectedRole"] == "Backend Engineer"


def test_smart_quotes_are_normalized():
    raw = "{“detectedRole”: “Data Scientist”, “confidence”: 70, “alternativeRoles”: [“ML Engineer”]}"
    result = coerce_to_schema(raw, RoleResult, ROLE_FALLBACK)
    assert result.detected_role == "Data Scientist"
    assert result.alternative_roles == ["ML Engineer"]


@pytest.mark.parametrize(
    "raw",
    [
        "",
        "I am sorry, I cannot analyze this resume.",
        '{"detectedRole": "Backend Engineer", "confidence": 9',
        '{"detectedRole": "Backend Engineer", "confidence": "high", "alternativeRoles": []}',
        '{"detectedRole": "Backend Engineer", "confidence": 140, "alternativeRoles": []}',
        '{"detectedRole": "Backend Engineer", "confidence": true, "alternativeRoles": []}',
        '{"detectedRole": "Backend Engineer", "confidence": 90}',
        "[1, 2, 3]",
    ],
)
def test_unusable_output_returns_exact_fallback(raw):
    assert coerce_to_schema(raw, RoleResult, ROLE_FALLBACK) is ROLE_FALLBACK


def test_array_preferred_when_it_opens_first():
    raw = 'Skills found: ["Python", "SQL"] (see {"note": "ignored"})'
    assert extract_json_text(raw) == '["Python", "SQL"]'
    fallback: List[str] = []
    assert coerce_to_schema('Skills: ["Python", "SQL"]', List[str], fallback) == ["Python", "SQL"]


def test_object_preferred_when_it_opens_first():
    raw = 'Result: {"strongVerbs": ["Led"], "score": 80} done'
    assert extract_json_text(raw) == '{"strongVerbs": ["Led"], "score": 80}'


def test_no_delimiters_yields_none():
    assert extract_json_text("no json here") is None


def test_list_of_strings_rejects_mixed_types():
    fallback: List[str] = []
    assert coerce_to_schema('["Python", 3]', List[str], fallback) is fallback


def test_parse_with_fallback_without_validator_returns_parsed_value():
    assert parse_with_fallback('noise {"a": 1} noise', {"a": 0}) == {"a": 1}


def test_parse_with_fallback_when_validator_raises():
    fallback = {"ok": False}

    def broken(_):
        raise KeyError("boom")

    assert parse_with_fallback('{"ok": true}', fallback, validator=broken) is fallback


def test_parse_with_fallback_logs_degradation(caplog):
    fallback = {"ok": False}
    with caplog.at_level("WARNING"):
        parse_with_fallback("plain prose", fallback)
    assert any("fallback" in r.getMessage() for r in caplog.records)


def test_sanitize_strips_markdown_and_is_idempotent():
    raw = '**Result**:\n```json\n{"name": *"x"*}\\n\n```'
    once = sanitize_llm_response(raw)
    assert "```" not in once
    assert "**" not in once
    assert "\\n" not in once
    assert sanitize_llm_response(once) == once


def test_schema_validator_is_strict():
    validate = schema_validator(RoleResult)
    assert validate({"detectedRole": "QA", "confidence": 50, "alternativeRoles": []})
    assert not validate({"detectedRole": "QA", "confidence": "50", "alternativeRoles": []})


def test_deeply_nested_json_degrades_to_fallback():
    fallback: List[str] = []
    assert parse_with_fallback("[" * 5000 + "]" * 5000, fallback) is fallback
    nested = '{"detectedRole": "QA", "confidence": 1, "alternativeRoles": ' + "[" * 5000 + "]" * 5000 + "}"
    assert coerce_to_schema(nested, RoleResult, ROLE_FALLBACK) is ROLE_FALLBACK
