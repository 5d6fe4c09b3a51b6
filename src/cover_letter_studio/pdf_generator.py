"""PDF generation for cover letters."""

import importlib
from dataclasses import dataclass
from functools import lru_cache
from io import BytesIO
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from .errors import ExportError
from .letter import Letter, LetterParagraph, ParagraphType
from .logging_config import get_logger
from .utils import ensure_directory

logger = get_logger("pdf_generator")

DEFAULT_PDF_FILENAME = "Cover_Letter.pdf"

# A4 portrait, all layout values in millimetres
PAGE_WIDTH_MM = 210.0
PAGE_HEIGHT_MM = 297.0
MARGIN_TOP = 25.4
MARGIN_LEFT = 25.4
MARGIN_RIGHT = 25.4
MARGIN_BOTTOM = 25.4

FONT_NAME = "Helvetica"
FONT_SIZE = 11
LINE_HEIGHT_MM = 5
PARAGRAPH_SPACING_MM = 3
SALUTATION_SPACING_MM = 6
CLOSING_SPACING_MM = 8


@dataclass
class PdfBackend:
    """Handle to the lazily imported reportlab pieces."""
    canvas: object
    simple_split: Callable
    page_size: tuple
    mm: float


@dataclass
class PlacedParagraph:
    """A paragraph's wrapped lines and where they start on the page."""
    page: int
    y: float  # millimetres from the top edge to the first baseline
    lines: List[str]
    paragraph_type: ParagraphType


@lru_cache(maxsize=None)
def ensure_pdf_backend() -> PdfBackend:
    """Import reportlab on first use and memoize the handle.

    Raises:
        ExportError: If the library cannot be loaded. Failures are not
            cached, so a later call tries again.
    """
    try:
        canvas_module = importlib.import_module("reportlab.pdfgen.canvas")
        utils_module = importlib.import_module("reportlab.lib.utils")
        pagesizes = importlib.import_module("reportlab.lib.pagesizes")
        units = importlib.import_module("reportlab.lib.units")
    except ImportError as e:
        logger.error("Failed to load reportlab: %s", e)
        raise ExportError(
            "Failed to load PDF generation library. "
            "Please check your installation and try again."
        ) from e

    logger.debug("PDF backend loaded")
    return PdfBackend(
        canvas=canvas_module,
        simple_split=utils_module.simpleSplit,
        page_size=pagesizes.A4,
        mm=units.mm,
    )


def layout_letter(
    paragraphs: Sequence[LetterParagraph],
    wrap: Callable[[str], List[str]],
    page_height: float = PAGE_HEIGHT_MM,
) -> List[PlacedParagraph]:
    """Place each paragraph on a page.

    A paragraph that does not fit the space left above the bottom margin
    starts a new page. A salutation is followed by extra space, a closing
    directly after a content paragraph gets extra space before it, and
    nothing is added after the name.

    Args:
        paragraphs: Paragraphs in letter order
        wrap: Splits a paragraph's text into printable lines
        page_height: Page height in millimetres

    Returns:
        Placement for every paragraph, in order
    """
    placed = []
    page = 0
    current_y = MARGIN_TOP

    for index, paragraph in enumerate(paragraphs):
        spacing_after = PARAGRAPH_SPACING_MM

        if paragraph.type is ParagraphType.SALUTATION:
            spacing_after = SALUTATION_SPACING_MM
        elif paragraph.type is ParagraphType.CLOSING:
            if index > 0 and paragraphs[index - 1].type is ParagraphType.CONTENT:
                current_y += CLOSING_SPACING_MM - PARAGRAPH_SPACING_MM
        elif paragraph.type is ParagraphType.NAME:
            spacing_after = 0

        lines = wrap(paragraph.text) or [""]
        text_height = len(lines) * LINE_HEIGHT_MM

        # A paragraph taller than a whole page is written from the top anyway
        if current_y + text_height > page_height - MARGIN_BOTTOM and current_y > MARGIN_TOP:
            page += 1
            current_y = MARGIN_TOP

        placed.append(PlacedParagraph(page, current_y, lines, paragraph.type))
        current_y += text_height + spacing_after

    return placed


def render_letter_pdf(letter: Letter, author: Optional[str] = None) -> bytes:
    """Render a letter to PDF bytes in memory.

    Args:
        letter: The letter to render
        author: Optional author metadata

    Returns:
        The PDF document
    """
    backend = ensure_pdf_backend()
    mm = backend.mm
    page_width, page_height = backend.page_size
    text_width = page_width - (MARGIN_LEFT + MARGIN_RIGHT) * mm

    def wrap(text: str) -> List[str]:
        return backend.simple_split(text, FONT_NAME, FONT_SIZE, text_width)

    placements = layout_letter(letter.paragraphs, wrap, page_height=page_height / mm)

    buffer = BytesIO()
    c = backend.canvas.Canvas(buffer, pagesize=backend.page_size)
    c.setTitle("Cover Letter")
    if author:
        c.setAuthor(author)

    current_page = 0
    for placement in placements:
        while current_page < placement.page:
            c.showPage()
            current_page += 1

        text = c.beginText(MARGIN_LEFT * mm, page_height - placement.y * mm)
        text.setFont(FONT_NAME, FONT_SIZE)
        text.setLeading(LINE_HEIGHT_MM * mm)
        for line in placement.lines:
            text.textLine(line)
        c.drawText(text)

    c.save()
    return buffer.getvalue()


def export_pdf(
    letter: Letter,
    output_dir: Path = None,
    filename: str = DEFAULT_PDF_FILENAME,
    author: Optional[str] = None,
) -> Optional[Path]:
    """Generate a paginated cover letter PDF.

    The whole document is rendered before anything is written, so a
    failure never leaves a partial file behind.

    Args:
        letter: The letter to export
        output_dir: Directory to save the PDF (default: OUTPUT_DIR)
        filename: Custom filename (default: Cover_Letter.pdf)
        author: Optional author metadata, usually the signer name

    Returns:
        Path to the generated PDF, or None for an empty letter

    Raises:
        ExportError: If the backend cannot be loaded or rendering fails
    """
    if letter.is_empty:
        return None

    try:
        pdf_bytes = render_letter_pdf(letter, author=author)
        output_path = ensure_directory(output_dir) / filename
        output_path.write_bytes(pdf_bytes)
    except ExportError:
        raise
    except Exception as e:
        logger.error("PDF generation error: %s", e)
        raise ExportError(f"Failed to generate PDF: {e}") from e

    logger.info("Saved PDF to %s", output_path)
    return output_path
