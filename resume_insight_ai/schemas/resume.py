"""Structured view of extracted resume text (named sections + metadata)."""

from typing import List

from pydantic import Field

from .base import CamelModel

# Canonical reconstruction order
SECTION_ORDER: List[str] = [
    "contact_info",
    "summary",
    "experience",
    "skills",
    "education",
    "projects",
    "certifications",
    "other",
]


class ResumeSections(CamelModel):
    contact_info: str = ""
    summary: str = ""
    experience: str = ""
    education: str = ""
    skills: str = ""
    projects: str = ""
    certifications: str = ""
    other: str = ""


class ResumeMetadata(CamelModel):
    original_length: int = Field(..., description="Length of the raw extracted text")
    cleaned_length: int = Field(..., description="Length of the structured text")
    sections_found: List[str] = Field(default_factory=list, description="Non-empty sections, canonical order")
    has_structure: bool = Field(..., description="True if at least one section header was recognized")


class ParsedResume(CamelModel):
    sections: ResumeSections
    clean_text: str = Field(..., description="Sections rendered as titled blocks")
    metadata: ResumeMetadata
