"""Heuristic resume sectionizer: normalize extracted text and split it into named sections."""

import logging
import re
import unicodedata
from typing import Dict, List, Optional, Pattern, Set, Tuple

from resume_insight_ai.config import MIN_CONTENT_CHARS
from resume_insight_ai.errors import ContentTooShortError
from resume_insight_ai.schemas.resume import (
    SECTION_ORDER,
    ParsedResume,
    ResumeMetadata,
    ResumeSections,
)
from resume_insight_ai.services.pii_scanner import (
    ADDRESS_PATTERNS,
    EMAIL_PATTERN,
    PHONE_PATTERNS,
    SOCIAL_PATTERNS,
)
from resume_insight_ai.utils.logger import get_logger

logger = get_logger(__name__)

BULLET_MARKER = "- "

# Iteration order matters: the first matching header wins.
SECTION_HEADER_PATTERNS: List[Tuple[str, Pattern[str]]] = [
    ("contact_info", re.compile(r"^(contact|contact\s+info(rmation)?|personal\s+(info|details)|details)$", re.I)),
    ("summary", re.compile(r"^(summary|profile|objective|about(\s+me)?|overview|professional\s+summary|career\s+objective)$", re.I)),
    ("experience", re.compile(r"^(experience|work|employment|career|professional\s+experience|work\s+experience|work\s+history|employment\s+history)$", re.I)),
    ("education", re.compile(r"^(education|academic(s|\s+background)?|qualifications|degrees?)$", re.I)),
    ("skills", re.compile(r"^(skills|technical(\s+skills)?|competencies|core\s+competencies|expertise|technologies|tools)$", re.I)),
    ("projects", re.compile(r"^(projects?|portfolio|personal\s+projects|work\s+samples?)$", re.I)),
    ("certifications", re.compile(r"^(certifications?|certificates?|licenses?((\s+and)?\s+certifications?)?|credentials?)$", re.I)),
]

_BULLET_PATTERNS: List[Pattern[str]] = [
    re.compile(r"^[ \t]*[•▪▫‣⁃◦▸▹▶►●○■□✓✔➢➤][ \t]*", re.M),
    re.compile(r"^[ \t]*[-*+][ \t]+", re.M),
    re.compile(r"^[ \t]*\d{1,2}[.)][ \t]+", re.M),
    re.compile(r"^[ \t]*(?:[ivx]{1,4}|[a-z])[.)][ \t]+", re.M),
]

_PAGE_NUMBER_LINE = re.compile(r"^[ \t]*(?:page[ \t]+\d+.*|\d{1,3}|-[ \t]*\d{1,3}[ \t]*-)[ \t]*$", re.I | re.M)
_SOFT_WRAP = re.compile(r"(?<=[a-z,])\n(?=[a-z])")
_CONTACT_START = re.compile(r"[\w.+-]+@[\w-]+\.|https?://|www\.|(?:linkedin|github)\.com/", re.I)
_CITY_STATE = re.compile(r"\b[A-Z][a-zA-Z]+(?:\s[A-Z][a-zA-Z]+)*,\s*[A-Z]{2}\b")
_NAME_LINE = re.compile(r"^[A-Z][a-zA-Z'.-]+(?:\s+[A-Z][a-zA-Z'.-]+){1,2}$")
_SENTENCE_END = re.compile(r"[.!?]$")

CONTACT_SCAN_LINES = 20
SUMMARY_MAX_SENTENCES = 3
SUMMARY_MIN_CHARS = 30

SECTION_TITLES: Dict[str, str] = {
    "contact_info": "CONTACT INFO",
    "summary": "SUMMARY",
    "experience": "EXPERIENCE",
    "skills": "SKILLS",
    "education": "EDUCATION",
    "projects": "PROJECTS",
    "certifications": "CERTIFICATIONS",
    "other": "OTHER",
}


def _join_soft_wrap(match: "re.Match[str]") -> str:
    # Contact lines stay on their own line even after a lowercase break.
    text = match.string
    previous = text[text.rfind("\n", 0, match.start()) + 1 : match.start()]
    if _is_contact_line(previous) or _CONTACT_START.match(text, match.end()):
        return "\n"
    return " "


def normalize_text(text: str) -> str:
    """
    Unify line endings, drop page-number lines, tidy whitespace, merge soft-wrapped
    lines, rewrite bullets to a single marker and collapse blank-line runs.
    Applying it to its own output returns the same string.
    """
    if not text:
        return ""
    t = unicodedata.normalize("NFC", text)
    t = t.replace("\r\n", "\n").replace("\r", "\n").replace("\f", "\n")
    t = _PAGE_NUMBER_LINE.sub("", t)
    t = re.sub(r"[ \t\u00a0]+", " ", t)
    t = "\n".join(line.strip() for line in t.split("\n"))
    t = _SOFT_WRAP.sub(_join_soft_wrap, t)
    for pattern in _BULLET_PATTERNS:
        t = pattern.sub(BULLET_MARKER, t)
    t = "\n".join(line.rstrip() for line in t.split("\n"))
    t = re.sub(r"\n{3,}", "\n\n", t)
    return t.strip()


def detect_section_header(line: str) -> Optional[str]:
    """Canonical section name if ``line`` is a header, else None."""
    clean = re.sub(r"[^\w\s]", "", line).strip()
    clean = re.sub(r"\s+", " ", clean)
    if not clean or len(clean) > 40:
        return None
    for section, pattern in SECTION_HEADER_PATTERNS:
        if pattern.match(clean):
            return section
    return None


def _is_contact_line(line: str) -> bool:
    if EMAIL_PATTERN.search(line):
        return True
    if any(p.search(line) for p in PHONE_PATTERNS):
        return True
    if any(p.search(line) for p in SOCIAL_PATTERNS):
        return True
    if any(p.search(line) for p in ADDRESS_PATTERNS):
        return True
    if _CITY_STATE.search(line) and len(line) <= 60:
        return True
    return bool(re.search(r"\b(linkedin|github|portfolio|website)\s*[:|/]", line, re.I))


def _is_name_line(line: str) -> bool:
    return bool(_NAME_LINE.match(line)) and detect_section_header(line) is None


def _claim_contact_lines(lines: List[str]) -> Set[int]:
    claimed: Set[int] = set()
    non_blank_seen = 0
    for i, line in enumerate(lines[:CONTACT_SCAN_LINES]):
        if not line:
            continue
        non_blank_seen += 1
        header = detect_section_header(line)
        if header:
            if header != "contact_info":
                break
            continue
        if _is_contact_line(line) or (non_blank_seen <= 2 and _is_name_line(line)):
            claimed.add(i)
    return claimed


def _claim_summary_lines(lines: List[str], claimed: Set[int]) -> List[int]:
    picked: List[int] = []
    for i, line in enumerate(lines[:CONTACT_SCAN_LINES]):
        if detect_section_header(line):
            break
        if i in claimed or not line:
            continue
        if len(line) > SUMMARY_MIN_CHARS and _SENTENCE_END.search(line):
            picked.append(i)
            if len(picked) >= SUMMARY_MAX_SENTENCES:
                break
    return picked


def extract_sections(normalized: str) -> Tuple[ResumeSections, bool]:
    """Split normalized text into sections; returns (sections, any_header_matched)."""
    lines = normalized.split("\n")
    buckets: Dict[str, List[str]] = {name: [] for name in SECTION_ORDER}

    contact_idx = _claim_contact_lines(lines)
    seen_contact: Set[str] = set()
    for i in sorted(contact_idx):
        if lines[i] not in seen_contact:
            seen_contact.add(lines[i])
            buckets["contact_info"].append(lines[i])

    summary_idx = _claim_summary_lines(lines, contact_idx)
    buckets["summary"].extend(lines[i] for i in summary_idx)
    claimed = contact_idx | set(summary_idx)

    current = "other"
    buffer: List[str] = []
    header_matched = False

    def flush() -> None:
        if buffer:
            existing = buckets[current]
            if existing:
                existing.append("")
            existing.extend(buffer)
            buffer.clear()

    for i, line in enumerate(lines):
        if i in claimed or not line:
            continue
        section = detect_section_header(line)
        if section:
            flush()
            current = section
            header_matched = True
        else:
            buffer.append(line)
    flush()

    sections = ResumeSections(**{name: "\n".join(content).strip() for name, content in buckets.items()})
    return sections, header_matched


def create_structured_text(sections: ResumeSections) -> str:
    """Render non-empty sections as '=== TITLE ===' blocks in canonical order."""
    parts = []
    for name in SECTION_ORDER:
        content = getattr(sections, name).strip()
        if content:
            parts.append(f"=== {SECTION_TITLES[name]} ===\n{content}")
    return "\n\n".join(parts)


def parse_resume(raw_text: str, log: Optional[logging.Logger] = None) -> ParsedResume:
    """Normalize ``raw_text`` and partition it into named resume sections."""
    log = log or logger
    stripped_len = len((raw_text or "").strip())
    if stripped_len < MIN_CONTENT_CHARS:
        raise ContentTooShortError(stripped_len, MIN_CONTENT_CHARS)

    normalized = normalize_text(raw_text)
    sections, header_matched = extract_sections(normalized)
    found = [name for name in SECTION_ORDER if getattr(sections, name)]
    clean_text = create_structured_text(sections)
    log.info("Resume parsed: sections=%s structured=%s", ",".join(found), header_matched)

    return ParsedResume(
        sections=sections,
        clean_text=clean_text,
        metadata=ResumeMetadata(
            original_length=len(raw_text),
            cleaned_length=len(clean_text),
            sections_found=found,
            has_structure=header_matched,
        ),
    )


def validate_parsed_resume(parsed: ParsedResume) -> Tuple[bool, List[str]]:
    """Quality checks on a parsed resume; returns (is_valid, issues)."""
    issues: List[str] = []
    if len(parsed.clean_text) < MIN_CONTENT_CHARS:
        issues.append(f"Resume text is too short (less than {MIN_CONTENT_CHARS} characters)")
    if not parsed.metadata.has_structure:
        issues.append("No clear sections detected in resume")
    if not parsed.sections.experience.strip() and not parsed.sections.skills.strip():
        issues.append("No work experience or skills section found")
    if "�" in parsed.clean_text or "□" in parsed.clean_text:
        issues.append("Text extraction may have encoding issues")
    return (not issues, issues)
