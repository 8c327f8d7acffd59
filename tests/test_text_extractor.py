import logging
from types import SimpleNamespace
from typing import List, Optional

import pytesseract
import pytest

from resume_insight_ai.cv_pipeline.ocr import correct_ocr_text
from resume_insight_ai.cv_pipeline.text_extractor import (
    DocumentKind,
    PdfStrategy,
    PlainTextStrategy,
    TextExtractor,
    clean_extracted_text,
    detect_kind,
    extract_text_from_file,
)
from resume_insight_ai.errors import ExtractionError, ExtractionErrorKind
from resume_insight_ai.schemas.document import Document

OCR_TEXT = "Jane Doe\nSenior Software Engineer at Acme Corp with ten years of experience"


class DummyPage:
    def __init__(self, text: Optional[str], number: int) -> None:
        self._text = text
        self.number = number
        self.rendered_at: List[int] = []

    def extract_text(self):
        return self._text

    def to_image(self, resolution):
        self.rendered_at.append(resolution)
        return SimpleNamespace(original=f"image-of-page-{self.number}")


class DummyPdf:
    def __init__(self, pages: List[DummyPage]) -> None:
        self.pages = pages

    def __enter__(self) -> "DummyPdf":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        return None


def patch_pdf(monkeypatch, texts: List[Optional[str]]) -> List[DummyPage]:
    pages = [DummyPage(text, i + 1) for i, text in enumerate(texts)]
    monkeypatch.setattr(
        "resume_insight_ai.cv_pipeline.text_extractor.pdfplumber.open",
        lambda stream: DummyPdf(pages),
    )
    return pages


class RecordingOcr:
    def __init__(self, text: str = OCR_TEXT) -> None:
        self.text = text
        self.images: List[str] = []

    def __call__(self, image) -> str:
        self.images.append(image)
        return self.text


def pdf_document() -> Document:
    return Document(content=b"%PDF-1.4 fake", media_type="application/pdf", filename="resume.pdf")


def test_pdf_text_layer_used_when_present(monkeypatch, sample_resume):
    patch_pdf(monkeypatch, [sample_resume, "Projects\nPayments API rewrite in Go"])
    ocr = RecordingOcr()
    extractor = TextExtractor(strategies={DocumentKind.PDF: PdfStrategy(ocr_engine=ocr)})
    text = extractor.extract(pdf_document())
    assert "Senior Engineer, Acme Corp" in text
    assert "Payments API rewrite in Go" in text
    assert ocr.images == []


def test_pdf_noise_fragments_are_dropped(monkeypatch, sample_resume):
    patch_pdf(monkeypatch, [sample_resume + "\n•••\n   \n" + "x" * 600])
    text = PdfStrategy(ocr_engine=RecordingOcr()).extract(b"%PDF")
    assert "•••" not in text
    assert "x" * 600 not in text


def test_scanned_pdf_ocr_is_limited_to_first_page(monkeypatch, caplog):
    # Only page 2 has a (tiny) text layer; OCR still renders page 1 only.
    pages = patch_pdf(monkeypatch, [None, "Jane", ""])
    ocr = RecordingOcr()
    strategy = PdfStrategy(ocr_engine=ocr)
    with caplog.at_level(logging.INFO):
        text = strategy.extract(b"%PDF")
    assert ocr.images == ["image-of-page-1"]
    assert pages[0].rendered_at == [144]
    assert pages[1].rendered_at == [] and pages[2].rendered_at == []
    assert "Senior Software Engineer at Acme Corp" in text
    assert any("OCR fallback triggered" in r.getMessage() for r in caplog.records)


def test_ocr_with_too_little_text_is_an_ocr_failure(monkeypatch):
    patch_pdf(monkeypatch, [""])
    with pytest.raises(ExtractionError) as exc_info:
        PdfStrategy(ocr_engine=RecordingOcr("J0hn")).extract(b"%PDF")
    assert exc_info.value.kind == ExtractionErrorKind.OCR_FAILURE
    assert exc_info.value.strategy == "pdf-ocr"


def test_missing_tesseract_is_an_ocr_failure(monkeypatch):
    patch_pdf(monkeypatch, [""])

    def missing_engine(image):
        raise pytesseract.TesseractNotFoundError()

    with pytest.raises(ExtractionError) as exc_info:
        PdfStrategy(ocr_engine=missing_engine).extract(b"%PDF")
    assert exc_info.value.kind == ExtractionErrorKind.OCR_FAILURE


def test_unreadable_pdf_is_corrupt(monkeypatch):
    def broken_open(stream):
        raise ValueError("No /Root object! - Is this really a PDF?")

    monkeypatch.setattr("resume_insight_ai.cv_pipeline.text_extractor.pdfplumber.open", broken_open)
    with pytest.raises(ExtractionError) as exc_info:
        TextExtractor().extract(pdf_document())
    assert exc_info.value.kind == ExtractionErrorKind.CORRUPT_FILE
    assert exc_info.value.strategy == "pdf"


def test_repeated_headers_and_footers_are_removed():
    bodies = ["Designed the billing platform", "Mentored junior developers", "Migrated services to Kubernetes"]
    pages = [f"ACME Resume Confidential\n{body}\nPage {i} of 3" for i, body in enumerate(bodies, start=1)]
    text = clean_extracted_text(pages)
    assert "Confidential" not in text
    assert "Page 2 of 3" not in text
    for body in bodies:
        assert body in text


def test_repeated_title_in_page_body_is_kept():
    bodies = [
        ("Acme Corp", "Designed the billing platform", "Cut invoice latency in half"),
        ("Globex", "Mentored junior developers", "Ran the on-call rotation"),
        ("Initech", "Migrated services to Kubernetes", "Automated release tagging"),
    ]
    pages = [
        f"Jane Doe | Curriculum Vitae\n{company}\nSoftware Engineer\n{first}\n{second}\njane.doe@example.com"
        for company, first, second in bodies
    ]
    text = clean_extracted_text(pages)
    assert text.count("Software Engineer") == 3
    assert "Curriculum Vitae" not in text
    assert "jane.doe@example.com" not in text
    assert "Initech" in text and "Automated release tagging" in text


def test_short_pages_keep_repeated_lines():
    pages = [
        "Software Engineer\nBuilt the reporting pipeline",
        "Software Engineer\nMigrated the search cluster",
        "Software Engineer\nWrote the onboarding guide",
    ]
    assert clean_extracted_text(pages).count("Software Engineer") == 3


def test_lines_repeated_only_twice_are_kept():
    text = clean_extracted_text(["Python\nfirst", "Python\nsecond", "third"])
    assert text.count("Python") == 2


def test_clean_extracted_text_strips_control_chars_and_blank_runs():
    text = clean_extracted_text(["Jane\x07 Doe\r\n\n\n\n\nEngineer"])
    assert text == "Jane Doe\n\nEngineer"


def test_plain_text_extraction(sample_resume):
    text = extract_text_from_file(sample_resume.encode("utf-8-sig"), "resume.txt", "text/plain")
    assert text.startswith("Jane Doe")


def test_unknown_type_decodes_text(sample_resume):
    text = extract_text_from_file(sample_resume.encode("utf-8"), "resume.md")
    assert "Kubernetes" in text


def test_unknown_binary_is_unsupported():
    with pytest.raises(ExtractionError) as exc_info:
        extract_text_from_file(b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR" * 10, "photo.png", "image/png")
    assert exc_info.value.kind == ExtractionErrorKind.UNSUPPORTED_FORMAT


def test_empty_file_is_empty_content():
    with pytest.raises(ExtractionError) as exc_info:
        extract_text_from_file(b"", "resume.txt")
    assert exc_info.value.kind == ExtractionErrorKind.EMPTY_CONTENT


def test_short_text_reports_strategy_and_count():
    with pytest.raises(ExtractionError) as exc_info:
        extract_text_from_file(b"Jane Doe, engineer", "resume.txt")
    err = exc_info.value
    assert err.kind == ExtractionErrorKind.EMPTY_CONTENT
    assert err.strategy == PlainTextStrategy.name
    assert err.char_count == len("Jane Doe, engineer")
    assert "different format" in err.user_message()


def test_invalid_docx_is_corrupt():
    with pytest.raises(ExtractionError) as exc_info:
        extract_text_from_file(b"not a zip archive", "resume.docx")
    assert exc_info.value.kind == ExtractionErrorKind.CORRUPT_FILE


@pytest.mark.parametrize(
    "media_type, filename, kind",
    [
        ("application/pdf", "", DocumentKind.PDF),
        ("", "CV.PDF", DocumentKind.PDF),
        ("application/vnd.openxmlformats-officedocument.wordprocessingml.document", "cv", DocumentKind.WORD),
        ("", "cv.doc", DocumentKind.WORD),
        ("text/plain; charset=utf-8", "cv", DocumentKind.PLAIN_TEXT),
        ("application/octet-stream", "cv.bin", DocumentKind.UNKNOWN),
    ],
)
def test_detect_kind(media_type, filename, kind):
    assert detect_kind(media_type, filename) == kind


def test_correct_ocr_text():
    assert correct_ocr_text("M|T graduate, |nc. founder") == "MIT graduate, Inc. founder"
    assert correct_ocr_text("pr0ject and exce1lent c1ass 5ki11s") == "project and excellent class 5ki11s"
    assert correct_ocr_text("Revenue grew 2O19 to 2l20") == "Revenue grew 2019 to 2120"
    assert correct_ocr_text("") == ""
