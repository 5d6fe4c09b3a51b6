"""Resume text acquisition from PDF and plain-text files."""

import mimetypes
from io import BytesIO
from pathlib import Path
from typing import Callable, Optional

from pypdf import PdfReader

from .errors import ResumeExtractionError, UnsupportedFileTypeError
from .logging_config import get_logger

logger = get_logger("resume_reader")

PDF_MIME_TYPE = "application/pdf"
TEXT_MIME_TYPE = "text/plain"
SUPPORTED_MIME_TYPES = (PDF_MIME_TYPE, TEXT_MIME_TYPE)

ProgressCallback = Callable[[int], None]


def _noop_progress(percent: int) -> None:
    pass


def detect_mime_type(file_path: Path) -> Optional[str]:
    """Guess a file's MIME type from its name."""
    mime_type, _ = mimetypes.guess_type(str(file_path))
    return mime_type


def extract_text_from_pdf_bytes(data: bytes, on_progress: ProgressCallback = None) -> str:
    """Validate a PDF and extract its text page by page.

    Progress is reported at 30 (bytes in hand), 50 (structure validated),
    60 (extractor ready) and 100 (done).

    Args:
        data: Raw PDF bytes
        on_progress: Optional callback receiving a percentage

    Returns:
        Page texts joined by blank lines

    Raises:
        ResumeExtractionError: If the PDF is malformed or unreadable
    """
    on_progress = on_progress or _noop_progress
    on_progress(30)

    try:
        # Strict parsing rejects structurally broken files up front
        reader = PdfReader(BytesIO(data), strict=True)
        page_count = len(reader.pages)
        on_progress(50)
        on_progress(60)

        page_texts = []
        for page in reader.pages:
            page_text = page.extract_text() or ""
            page_texts.append(" ".join(page_text.split("\n")).strip())
    except Exception as e:
        # pypdf raises assorted builtin errors on damaged files, not only PyPdfError
        logger.error("Error extracting text from PDF: %s", e)
        raise ResumeExtractionError(f"Failed to process PDF: {e}") from e

    logger.info("Extracted text from %d PDF pages", page_count)
    on_progress(100)
    return "\n\n".join(page_texts).strip()


def read_resume_file(file_path: Path, on_progress: ProgressCallback = None) -> str:
    """Read resume text from a PDF or plain-text file.

    Args:
        file_path: Path to the resume file
        on_progress: Optional callback receiving a percentage (10..100)

    Returns:
        Extracted resume text

    Raises:
        UnsupportedFileTypeError: If the file is neither PDF nor plain text
        ResumeExtractionError: If the file cannot be read or parsed
    """
    file_path = Path(file_path)
    on_progress = on_progress or _noop_progress

    mime_type = detect_mime_type(file_path)
    if mime_type not in SUPPORTED_MIME_TYPES:
        raise UnsupportedFileTypeError("Unsupported file type. Please upload PDF or TXT.")

    if mime_type == TEXT_MIME_TYPE:
        on_progress(50)
        try:
            # Undecodable bytes become U+FFFD instead of failing the upload
            text = file_path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            raise ResumeExtractionError(f"Failed to read text file: {e}") from e
        on_progress(100)
        return text

    on_progress(10)
    try:
        data = file_path.read_bytes()
    except OSError as e:
        raise ResumeExtractionError(f"Failed to process PDF: {e}") from e

    return extract_text_from_pdf_bytes(data, on_progress)
