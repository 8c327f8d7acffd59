"""Local regex scan for personally identifiable information (no network)."""

import re
from typing import Callable, Iterable, List, Pattern, Tuple

from resume_insight_ai.schemas.pii import PIIFindings
from resume_insight_ai.utils.helpers import dedupe_preserving_order, digits_only

EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")

PHONE_PATTERNS: List[Pattern[str]] = [
    # international prefix: +44 20 7946 0958, +1 (555) 123-4567
    re.compile(r"\+\d{1,3}[\s.-]?\(?\d{1,4}\)?(?:[\s.-]?\d{2,4}){2,4}"),
    # parenthesized area code: (555) 123-4567
    re.compile(r"\(\d{3}\)\s*\d{3}[\s.-]?\d{4}"),
    # bare 10-digit groups: 555-123-4567, 555.123.4567, 555 123 4567
    re.compile(r"(?<![\d+])\d{3}[\s.-]?\d{3}[\s.-]?\d{4}(?!\d)"),
    # generic digit run
    re.compile(r"(?<![\d+])\d{10,15}(?!\d)"),
]

_DOMAIN_PREFIX = r"(?<![\w@.\-/])(?:https?://)?(?:www\.)?"

SOCIAL_PATTERNS: List[Pattern[str]] = [
    re.compile(_DOMAIN_PREFIX + r"linkedin\.com/(?:in|pub)/[A-Za-z0-9_%-]+", re.IGNORECASE),
    re.compile(_DOMAIN_PREFIX + r"github\.com/[A-Za-z0-9_-]+", re.IGNORECASE),
    re.compile(_DOMAIN_PREFIX + r"gitlab\.com/[A-Za-z0-9_.-]+", re.IGNORECASE),
    re.compile(_DOMAIN_PREFIX + r"(?:twitter|x)\.com/[A-Za-z0-9_]+", re.IGNORECASE),
    re.compile(_DOMAIN_PREFIX + r"medium\.com/@[A-Za-z0-9_.-]+", re.IGNORECASE),
    re.compile(_DOMAIN_PREFIX + r"stackoverflow\.com/users/\d+(?:/[A-Za-z0-9_-]+)?", re.IGNORECASE),
    re.compile(_DOMAIN_PREFIX + r"(?:behance\.net|dribbble\.com|instagram\.com)/[A-Za-z0-9_.-]+", re.IGNORECASE),
]

# "Portfolio: janedoe.dev", "Website - https://..."
LABELED_LINK_PATTERN = re.compile(r"\b(?:portfolio|website|blog|homepage)\s*[:\-]\s*(\S+)", re.IGNORECASE)

_STREET_SUFFIX = (
    r"(?:Street|St|Avenue|Ave|Road|Rd|Boulevard|Blvd|Lane|Ln|Drive|Dr|Court|Ct|Way|"
    r"Place|Pl|Terrace|Parkway|Pkwy|Circle|Cir|Highway|Hwy)"
)

ADDRESS_PATTERNS: List[Pattern[str]] = [
    re.compile(r"\b\d{1,6}\s+(?:[A-Z][A-Za-z0-9'.-]*\s+){1,4}" + _STREET_SUFFIX + r"\b\.?(?:,?\s*(?:Apt|Suite|Unit|#)\s*[\w-]+)?"),
    # City, ST 12345(-6789)
    re.compile(r"\b[A-Z][a-zA-Z]+(?:\s[A-Z][a-zA-Z]+){0,2},\s*[A-Z]{2}\s+\d{5}(?:-\d{4})?\b"),
    re.compile(r"\bP\.?\s?O\.?\s*Box\s+\d+\b", re.IGNORECASE),
]

_TRAILING_PUNCTUATION = ".,;:)]}>\"'"

Match = Tuple[int, int, str]


def _matches(patterns: Iterable[Pattern[str]], text: str, group: int = 0) -> List[Match]:
    found: List[Match] = []
    for pattern in patterns:
        for m in pattern.finditer(text):
            value = m.group(group).rstrip(_TRAILING_PUNCTUATION)
            if value:
                found.append((m.start(group), m.start(group) + len(value), value))
    return found


def _non_overlapping(matches: List[Match]) -> List[str]:
    """Keep matches in text order; a match inside an already-kept span is dropped."""
    kept: List[Match] = []
    for start, end, value in sorted(matches, key=lambda m: (m[0], -(m[1] - m[0]))):
        if any(start < k_end and end > k_start for k_start, k_end, _ in kept):
            continue
        kept.append((start, end, value))
    return [value for _, _, value in kept]


def _normalize_link(value: str) -> str:
    v = value.lower()
    v = re.sub(r"^https?://", "", v)
    v = re.sub(r"^www\.", "", v)
    return v.rstrip("/")


def _normalize_address(value: str) -> str:
    return re.sub(r"\s+", " ", value).strip().lower()


def _collect(
    matches: List[Match],
    key: Callable[[str], str],
) -> List[str]:
    return dedupe_preserving_order(_non_overlapping(matches), key=key)


def _phones(text: str) -> List[str]:
    candidates = [m for m in _matches(PHONE_PATTERNS, text) if 10 <= len(digits_only(m[2])) <= 15]
    return _collect(candidates, key=digits_only)


def _social_links(text: str) -> List[str]:
    matches = _matches(SOCIAL_PATTERNS, text)
    matches.extend(
        m for m in _matches([LABELED_LINK_PATTERN], text, group=1) if "@" not in m[2]
    )
    return _collect(matches, key=_normalize_link)


def detect_pii(text: str) -> PIIFindings:
    """
    Scan ``text`` for emails, phone numbers, postal addresses and social profile links.
    Pure and deterministic; no matches yield empty lists.
    """
    if not text:
        return PIIFindings()
    return PIIFindings(
        emails=_collect(_matches([EMAIL_PATTERN], text), key=str.lower),
        phones=_phones(text),
        addresses=_collect(_matches(ADDRESS_PATTERNS, text), key=_normalize_address),
        social_media=_social_links(text),
    )
