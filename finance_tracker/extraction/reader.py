"""
Receipt text reader.

Turns an uploaded receipt into raw text: images go through
Tesseract, PDFs through pdfplumber's text layer. The text is
then handed to the field extractor.
"""

import io
import re
import shlex
from dataclasses import dataclass

import pdfplumber
import pytesseract
import structlog
from PIL import Image, UnidentifiedImageError

from finance_tracker.config import get_settings
from finance_tracker.errors import ExtractionError, ValidationError
from finance_tracker.extraction.fields import ReceiptFields, extract_fields

logger = structlog.get_logger(__name__)

# Receipts only need letters, digits and a few money/date symbols.
CHAR_WHITELIST = (
    "0123456789"
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    "abcdefghijklmnopqrstuvwxyz"
    ".,$/- "
)

# psm 6: treat the image as a single uniform block of text.
TESSERACT_CONFIG = "--psm 6 -c " + shlex.quote(
    f"tessedit_char_whitelist={CHAR_WHITELIST}"
)

_SPACES = re.compile(r"[ \t\f\v]+")


@dataclass(frozen=True)
class ReceiptScan:
    text: str
    fields: ReceiptFields


class ReceiptReader:
    """
    Reads text out of receipt images and PDFs.

    Args:
        max_pages: PDFs are only read up to this many pages.
        tesseract_cmd: path to the tesseract binary, if it is
            not on PATH.
    """

    def __init__(self, max_pages: int = 5, tesseract_cmd: str | None = None):
        self.max_pages = max_pages
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd

    @classmethod
    def from_settings(cls) -> "ReceiptReader":
        settings = get_settings()
        return cls(
            max_pages=settings.PDF_MAX_PAGES,
            tesseract_cmd=settings.TESSERACT_CMD,
        )

    def read_image(self, data: bytes) -> str:
        try:
            with Image.open(io.BytesIO(data)) as image:
                return pytesseract.image_to_string(
                    image, lang="eng", config=TESSERACT_CONFIG
                )
        except (UnidentifiedImageError, pytesseract.TesseractError, OSError) as e:
            logger.error("image_ocr_failed", error=str(e))
            raise ExtractionError(
                "Failed to process image. Please try again "
                "or upload a clearer image."
            ) from e

    def read_pdf(self, data: bytes) -> str:
        """
        Text of the first max_pages pages.

        A page that fails to extract is logged and skipped; the
        remaining pages are still read.
        """
        page_texts = []
        try:
            with pdfplumber.open(io.BytesIO(data)) as pdf:
                for number, page in enumerate(pdf.pages[: self.max_pages], start=1):
                    try:
                        raw = page.extract_text() or ""
                    except Exception as e:
                        logger.warning("pdf_page_failed", page=number, error=str(e))
                        continue
                    text = _normalise(raw)
                    if text:
                        page_texts.append(text)
        except Exception as e:
            logger.error("pdf_open_failed", error=str(e))
            raise ExtractionError(
                "Invalid PDF file. Please make sure the file is not corrupted."
            ) from e

        if not page_texts:
            raise ExtractionError(
                "No text content found in the PDF. "
                "The file might be scanned or image-based."
            )
        return "\n".join(page_texts) + "\n"

    def read(self, content_type: str | None, filename: str | None, data: bytes) -> str:
        content_type = (content_type or "").lower()
        if content_type == "application/pdf" or (
            filename or ""
        ).lower().endswith(".pdf"):
            return self.read_pdf(data)
        if content_type.startswith("image/"):
            return self.read_image(data)
        raise ValidationError(
            "Unsupported file type. Please upload an image or PDF file."
        )

    def scan(
        self, content_type: str | None, filename: str | None, data: bytes
    ) -> ReceiptScan:
        """Read the upload and extract its fields."""
        text = self.read(content_type, filename, data)
        fields = extract_fields(text)
        logger.info(
            "receipt_scanned",
            filename=filename,
            characters=len(text),
            found=not fields.is_empty,
        )
        return ReceiptScan(text=text, fields=fields)


def _normalise(text: str) -> str:
    """Collapse runs of spaces inside lines and drop blank lines."""
    lines = (_SPACES.sub(" ", line).strip() for line in text.splitlines())
    return "\n".join(line for line in lines if line)
