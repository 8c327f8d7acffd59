"""Extract raw text from uploaded resume files (PDF, Word, plain text). In-memory only."""

import logging
import re
import unicodedata
from abc import ABC, abstractmethod
from collections import Counter
from enum import Enum
from io import BytesIO
from typing import Dict, List, Optional, Set

import pdfplumber
import pytesseract
from docx import Document as DocxDocument

from resume_insight_ai.config import (
    MAX_FRAGMENT_CHARS,
    MIN_CONTENT_CHARS,
    OCR_MAX_PAGES,
    OCR_RENDER_SCALE,
    OCR_TRIGGER_CHARS,
)
from resume_insight_ai.cv_pipeline.ocr import OcrEngine, ocr_pages, recognize_image
from resume_insight_ai.errors import ExtractionError, ExtractionErrorKind
from resume_insight_ai.schemas.document import Document
from resume_insight_ai.utils.logger import get_logger

logger = get_logger(__name__)

PDF_MEDIA_TYPES = {"application/pdf"}
WORD_MEDIA_TYPES = {
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/msword",
}
TEXT_MEDIA_TYPES = {"text/plain"}

_PAGE_NUMBER = re.compile(r"^(?:page\s*)?#+(?:\s*(?:of|/)\s*#+)?$", re.I)
_CONFIDENTIAL = re.compile(r"\bconfidential\b", re.I)
_SYMBOLS_ONLY = re.compile(r"^[\W_]+$")
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0e-\x1f\x7f]")
BOILERPLATE_MAX_CHARS = 60
REPEAT_THRESHOLD = 2
PAGE_EDGE_LINES = 2


class DocumentKind(str, Enum):
    PDF = "pdf"
    WORD = "word"
    PLAIN_TEXT = "plain_text"
    UNKNOWN = "unknown"


def detect_kind(media_type: str, filename: str) -> DocumentKind:
    """Classify an upload by declared MIME type, then by filename extension."""
    mt = (media_type or "").split(";")[0].strip().lower()
    name = (filename or "").lower().strip()
    if mt in PDF_MEDIA_TYPES or name.endswith(".pdf"):
        return DocumentKind.PDF
    if mt in WORD_MEDIA_TYPES or name.endswith(".docx") or name.endswith(".doc"):
        return DocumentKind.WORD
    if mt in TEXT_MEDIA_TYPES or name.endswith(".txt"):
        return DocumentKind.PLAIN_TEXT
    return DocumentKind.UNKNOWN


def _is_noise_fragment(fragment: str) -> bool:
    """Whitespace-only, pure-symbol (graphics artifacts) or implausibly long runs."""
    stripped = fragment.strip()
    return not stripped or bool(_SYMBOLS_ONLY.match(stripped)) or len(stripped) > MAX_FRAGMENT_CHARS


def _line_key(line: str) -> str:
    return re.sub(r"\d+", "#", re.sub(r"\s+", " ", line.strip().lower()))


def _is_banner(key: str) -> bool:
    return bool(_PAGE_NUMBER.match(key)) or bool(_CONFIDENTIAL.search(key))


def _edge_positions(lines: List[str]) -> Set[int]:
    """Indexes of the first/last few non-blank lines of a page; none on pages too short to have a body."""
    non_blank = [i for i, line in enumerate(lines) if line.strip()]
    if len(non_blank) <= 2 * PAGE_EDGE_LINES:
        return set()
    return set(non_blank[:PAGE_EDGE_LINES] + non_blank[-PAGE_EDGE_LINES:])


def clean_extracted_text(pages: List[str]) -> str:
    """
    Post-extraction cleanup for PDF/OCR output: drop header/footer lines repeated on
    more than two pages, strip control characters, normalize whitespace and collapse
    runs of blank lines.

    Page numbers and "confidential" banners go wherever they repeat. Other short
    lines only count as boilerplate while they repeat at the top or bottom of pages,
    so a job title or skill repeated in page bodies is kept.
    """
    page_lines = [
        [line for line in _CONTROL_CHARS.sub("", page.replace("\f", "\n").replace("\r", "\n")).split("\n")]
        for page in pages
    ]
    page_edges = [_edge_positions(lines) for lines in page_lines]

    occurrences: Counter = Counter()
    edge_occurrences: Counter = Counter()
    for lines, edges in zip(page_lines, page_edges):
        occurrences.update({_line_key(line) for line in lines if line.strip()})
        edge_occurrences.update({_line_key(lines[i]) for i in edges})
    banners = {key for key, count in occurrences.items() if count > REPEAT_THRESHOLD and _is_banner(key)}
    edge_boilerplate = {
        key
        for key, count in edge_occurrences.items()
        if count > REPEAT_THRESHOLD and len(key) <= BOILERPLATE_MAX_CHARS
    }

    kept: List[str] = []
    for lines, edges in zip(page_lines, page_edges):
        for i, line in enumerate(lines):
            if line.strip():
                key = _line_key(line)
                if key in banners or (i in edges and key in edge_boilerplate):
                    continue
            kept.append(re.sub(r"[ \t\u00a0]+", " ", unicodedata.normalize("NFC", line)).strip())
        kept.append("")

    text = "\n".join(kept)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


class ExtractionStrategy(ABC):
    """Turns document bytes into text."""

    name: str = "base"

    @abstractmethod
    def extract(self, content: bytes) -> str:
        pass


class PdfStrategy(ExtractionStrategy):
    """pdfplumber text layer, with OCR of the leading page(s) when the layer is (nearly) empty."""

    name = "pdf"

    def __init__(
        self,
        ocr_engine: OcrEngine = recognize_image,
        ocr_trigger_chars: int = OCR_TRIGGER_CHARS,
        ocr_scale: int = OCR_RENDER_SCALE,
        ocr_max_pages: int = OCR_MAX_PAGES,
        log: Optional[logging.Logger] = None,
    ) -> None:
        self._ocr_engine = ocr_engine
        self._ocr_trigger_chars = ocr_trigger_chars
        self._ocr_scale = ocr_scale
        self._ocr_max_pages = ocr_max_pages
        self._logger = log or logger

    def extract(self, content: bytes) -> str:
        try:
            with pdfplumber.open(BytesIO(content)) as pdf:
                page_texts = []
                for page in pdf.pages:
                    fragments = (page.extract_text() or "").split("\n")
                    page_texts.append("\n".join(f for f in fragments if not _is_noise_fragment(f)))
                text = clean_extracted_text(page_texts)
                self._logger.info("PDF text layer: %s pages, %s characters", len(page_texts), len(text))
                if len(text) >= self._ocr_trigger_chars:
                    return text
                self._logger.info(
                    "OCR fallback triggered: text layer has %s characters (< %s)",
                    len(text),
                    self._ocr_trigger_chars,
                )
                return self._ocr(pdf.pages)
        except ExtractionError:
            raise
        except Exception as e:
            self._logger.exception("PDF extraction failed: %s", e)
            raise ExtractionError(
                ExtractionErrorKind.CORRUPT_FILE,
                f"PDF processing failed: invalid or corrupted PDF file ({e}).",
                strategy=self.name,
            ) from e

    def _ocr(self, pages: List) -> str:
        try:
            raw = ocr_pages(
                pages,
                engine=self._ocr_engine,
                scale=self._ocr_scale,
                max_pages=self._ocr_max_pages,
            )
        except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError, OSError, ValueError) as e:
            self._logger.error("OCR failed: %s", e)
            raise ExtractionError(
                ExtractionErrorKind.OCR_FAILURE,
                f"The PDF appears to be image-based and text recognition failed: {e}",
                strategy="pdf-ocr",
            ) from e
        text = clean_extracted_text([raw])
        if len(text) < MIN_CONTENT_CHARS:
            raise ExtractionError(
                ExtractionErrorKind.OCR_FAILURE,
                f"Text recognition produced too little text ({len(text)} characters).",
                strategy="pdf-ocr",
                char_count=len(text),
            )
        self._logger.info("OCR recovered %s characters", len(text))
        return text


class WordStrategy(ExtractionStrategy):
    """python-docx paragraphs and table cells, in document order."""

    name = "word"

    def extract(self, content: bytes) -> str:
        try:
            doc = DocxDocument(BytesIO(content))
        except Exception as e:
            logger.warning("Word document could not be opened: %s", e)
            raise ExtractionError(
                ExtractionErrorKind.CORRUPT_FILE,
                "Word document format not supported or file is corrupted. "
                "Legacy .doc files must be saved as .docx first.",
                strategy=self.name,
            ) from e
        parts = [p.text for p in doc.paragraphs if p.text.strip()]
        for table in doc.tables:
            for row in table.rows:
                cells = [c.text.strip() for c in row.cells if c.text.strip()]
                if cells:
                    parts.append(" | ".join(dict.fromkeys(cells)))
        text = "\n".join(parts)
        if not text.strip():
            raise ExtractionError(
                ExtractionErrorKind.EMPTY_CONTENT,
                "Word document appears to contain no readable text.",
                strategy=self.name,
            )
        return text


class PlainTextStrategy(ExtractionStrategy):
    """UTF-8 decode (BOM tolerant, undecodable bytes replaced)."""

    name = "plain-text"

    def __init__(self, reject_binary: bool = False) -> None:
        self._reject_binary = reject_binary
        if reject_binary:
            self.name = "plain-text (fallback)"

    def extract(self, content: bytes) -> str:
        if self._reject_binary and b"\x00" in content:
            raise ExtractionError(
                ExtractionErrorKind.UNSUPPORTED_FORMAT,
                "Unsupported file type: the file is binary and not a PDF, Word or text document.",
                strategy=self.name,
            )
        text = content.decode("utf-8-sig", errors="replace")
        if not text.strip():
            raise ExtractionError(
                ExtractionErrorKind.EMPTY_CONTENT,
                "Text file is empty or contains no readable content.",
                strategy=self.name,
            )
        return text


def default_strategies() -> Dict[DocumentKind, ExtractionStrategy]:
    return {
        DocumentKind.PDF: PdfStrategy(),
        DocumentKind.WORD: WordStrategy(),
        DocumentKind.PLAIN_TEXT: PlainTextStrategy(),
        DocumentKind.UNKNOWN: PlainTextStrategy(reject_binary=True),
    }


class TextExtractor:
    """Dispatch an uploaded Document to the strategy for its kind and enforce the content minimum."""

    def __init__(
        self,
        strategies: Optional[Dict[DocumentKind, ExtractionStrategy]] = None,
        min_chars: int = MIN_CONTENT_CHARS,
        log: Optional[logging.Logger] = None,
    ) -> None:
        self._strategies = strategies or default_strategies()
        self._min_chars = min_chars
        self._logger = log or logger

    def extract(self, document: Document) -> str:
        kind = detect_kind(document.media_type, document.filename)
        strategy = self._strategies.get(kind) or self._strategies[DocumentKind.UNKNOWN]
        self._logger.info(
            "Extracting text from %s (%s bytes) using %s strategy",
            document.filename or "<unnamed>",
            len(document.content),
            strategy.name,
        )
        if not document.content:
            raise ExtractionError(
                ExtractionErrorKind.EMPTY_CONTENT,
                "The uploaded file is empty.",
                strategy=strategy.name,
            )
        text = strategy.extract(document.content)
        char_count = len(text.strip())
        if char_count < self._min_chars:
            raise ExtractionError(
                ExtractionErrorKind.EMPTY_CONTENT,
                f"Resume text is too short or empty ({strategy.name} extraction produced "
                f"{char_count} characters, at least {self._min_chars} required).",
                strategy=strategy.name,
                char_count=char_count,
            )
        self._logger.info("Extracted %s characters from %s", char_count, document.filename or "<unnamed>")
        return text


def extract_text_from_file(file_bytes: bytes, filename: str, media_type: str = "") -> str:
    """Convenience wrapper: extract text from raw bytes with the default strategies."""
    return TextExtractor().extract(Document(content=file_bytes, media_type=media_type, filename=filename))
