"""Resume upload pipeline: text extraction (PDF/DOCX/TXT, OCR fallback) and sectioning."""

from .sectionizer import create_structured_text, parse_resume, validate_parsed_resume
from .text_extractor import TextExtractor, extract_text_from_file

__all__ = [
    "TextExtractor",
    "extract_text_from_file",
    "parse_resume",
    "create_structured_text",
    "validate_parsed_resume",
]
