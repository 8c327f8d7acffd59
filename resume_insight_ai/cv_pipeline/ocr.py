"""OCR fallback for image-based PDFs: render pages, recognize text, fix common misreads."""

import re
from typing import Any, Callable, Iterable, List

import pytesseract
from PIL import Image

from resume_insight_ai.config import OCR_MAX_PAGES, OCR_RENDER_SCALE

PDF_BASE_DPI = 72

OcrEngine = Callable[[Image.Image], str]

# (pattern, replacement) applied in order
_OCR_CORRECTIONS = [
    (re.compile(r"(?<=[A-Za-z])\||\|(?=[a-z])"), "I"),  # |nc. -> Inc., M|T -> MIT
    (re.compile(r"(?<=[a-z])0(?=[a-z])"), "o"),
    (re.compile(r"(?<=[a-z])1(?=[a-z])"), "l"),
    (re.compile(r"(?<=[a-z])5(?=[a-z])"), "s"),
    (re.compile(r"(?<=\d)[Oo](?=\d)"), "0"),
    (re.compile(r"(?<=\d)[lI](?=\d)"), "1"),
    (re.compile(r"[ \t]+"), " "),
]


def correct_ocr_text(text: str) -> str:
    """Fix frequent OCR misrecognitions: stray pipes and digit/letter swaps inside words."""
    if not text:
        return ""
    corrected = text
    for pattern, replacement in _OCR_CORRECTIONS:
        corrected = pattern.sub(replacement, corrected)
    return "\n".join(line.strip() for line in corrected.split("\n")).strip()


def recognize_image(image: Image.Image) -> str:
    """Run Tesseract on a rendered page image."""
    return pytesseract.image_to_string(image)


def render_page(page: Any, scale: int = OCR_RENDER_SCALE) -> Image.Image:
    """Rasterize a pdfplumber page at ``scale`` x the PDF base resolution."""
    return page.to_image(resolution=PDF_BASE_DPI * scale).original


def ocr_pages(
    pages: Iterable[Any],
    engine: OcrEngine = recognize_image,
    scale: int = OCR_RENDER_SCALE,
    max_pages: int = OCR_MAX_PAGES,
) -> str:
    """
    Render up to ``max_pages`` leading pages and OCR them. With the default of one
    page, later pages of a scanned multi-page PDF are not recognized.
    """
    texts: List[str] = []
    for index, page in enumerate(pages):
        if index >= max_pages:
            break
        raw = engine(render_page(page, scale=scale))
        corrected = correct_ocr_text(raw)
        if corrected:
            texts.append(corrected)
    return "\n".join(texts)
