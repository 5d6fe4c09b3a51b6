"""Tests for PDF layout and export.

This test suite covers:
- Pagination and per-role spacing of the layout step
- PDF files written with reportlab and read back with pypdf
- Backend loading failures
"""

from unittest.mock import patch

import pytest
from pypdf import PdfReader

from src.cover_letter_studio import pdf_generator
from src.cover_letter_studio.assembly import assemble_letter
from src.cover_letter_studio.errors import ExportError
from src.cover_letter_studio.letter import Letter
from src.cover_letter_studio.pdf_generator import (
    CLOSING_SPACING_MM,
    LINE_HEIGHT_MM,
    MARGIN_TOP,
    PARAGRAPH_SPACING_MM,
    SALUTATION_SPACING_MM,
    ensure_pdf_backend,
    export_pdf,
    layout_letter,
)


def one_line(text):
    return [text]


def sample_letter(paragraphs=("First paragraph.", "Second paragraph.")) -> Letter:
    return assemble_letter("\n\n".join(paragraphs), "Dear Hiring Manager,", "Sincerely,", "Jane Doe")


class TestLayoutLetter:
    """Tests for the pure layout step."""

    def test_vertical_positions(self):
        placed = layout_letter(sample_letter().paragraphs, one_line)
        ys = [p.y for p in placed]

        salutation_y = MARGIN_TOP
        first_y = salutation_y + LINE_HEIGHT_MM + SALUTATION_SPACING_MM
        second_y = first_y + LINE_HEIGHT_MM + PARAGRAPH_SPACING_MM
        closing_y = (second_y + LINE_HEIGHT_MM + PARAGRAPH_SPACING_MM
                     + CLOSING_SPACING_MM - PARAGRAPH_SPACING_MM)
        name_y = closing_y + LINE_HEIGHT_MM + PARAGRAPH_SPACING_MM

        assert ys == pytest.approx([salutation_y, first_y, second_y, closing_y, name_y])
        assert all(p.page == 0 for p in placed)

    def test_closing_without_preceding_content_gets_no_extra_space(self):
        letter = Letter.from_paragraphs(sample_letter().head + sample_letter().tail)
        placed = layout_letter(letter.paragraphs, one_line)

        closing_y = MARGIN_TOP + LINE_HEIGHT_MM + SALUTATION_SPACING_MM
        assert placed[1].y == pytest.approx(closing_y)

    def test_wrapped_lines_take_height(self):
        def three_lines(text):
            return [text, text, text]

        placed = layout_letter(sample_letter().paragraphs, three_lines)
        assert placed[1].y - placed[0].y == pytest.approx(3 * LINE_HEIGHT_MM + SALUTATION_SPACING_MM)

    def test_page_break_when_paragraph_does_not_fit(self):
        letter = sample_letter(paragraphs=[f"Paragraph {i}" for i in range(40)])

        def ten_lines(text):
            return [text] * 10

        placed = layout_letter(letter.paragraphs, ten_lines)
        pages = [p.page for p in placed]

        assert pages == sorted(pages)
        assert pages[-1] > 0
        for p in placed:
            assert p.y + len(p.lines) * LINE_HEIGHT_MM <= 297.0 - 25.4 + 1e-6
        first_on_new_page = next(p for p in placed if p.page == 1)
        assert first_on_new_page.y == pytest.approx(MARGIN_TOP)

    def test_oversized_paragraph_does_not_produce_blank_page(self):
        letter = assemble_letter("Huge.", "", "", "")

        placed = layout_letter(letter.paragraphs, lambda text: [text] * 100)
        assert placed[0].page == 0

    def test_empty_wrap_counts_as_one_line(self):
        placed = layout_letter(sample_letter().paragraphs, lambda text: [])
        assert placed[0].lines == [""]


class TestExportPdf:
    """Tests for writing PDFs."""

    def test_export_basic(self, tmp_path):
        path = export_pdf(sample_letter(), tmp_path, "Jane_Doe_Cover_Letter.pdf", author="Jane Doe")

        assert path == tmp_path / "Jane_Doe_Cover_Letter.pdf"
        reader = PdfReader(str(path))
        assert len(reader.pages) == 1

        text = reader.pages[0].extract_text()
        assert "Dear Hiring Manager," in text
        assert "Second paragraph." in text
        assert "Jane Doe" in text

    def test_metadata(self, tmp_path):
        path = export_pdf(sample_letter(), tmp_path, author="Jane Doe")
        metadata = PdfReader(str(path)).metadata

        assert metadata.title == "Cover Letter"
        assert metadata.author == "Jane Doe"

    def test_default_filename(self, tmp_path):
        assert export_pdf(sample_letter(), tmp_path).name == "Cover_Letter.pdf"

    def test_long_letter_paginates(self, tmp_path):
        long_paragraph = " ".join(["This sentence pads the paragraph to several lines."] * 12)
        letter = sample_letter(paragraphs=[long_paragraph] * 8)

        path = export_pdf(letter, tmp_path)

        assert len(PdfReader(str(path)).pages) > 1

    def test_empty_letter_writes_nothing(self, tmp_path):
        assert export_pdf(Letter(), tmp_path) is None
        assert list(tmp_path.iterdir()) == []

    def test_backend_load_failure(self, tmp_path):
        ensure_pdf_backend.cache_clear()
        try:
            with patch.object(pdf_generator.importlib, "import_module", side_effect=ImportError("offline")):
                with pytest.raises(ExportError, match="Failed to load PDF generation library"):
                    export_pdf(sample_letter(), tmp_path)
        finally:
            ensure_pdf_backend.cache_clear()

        assert list(tmp_path.iterdir()) == []

    def test_render_failure_leaves_no_file(self, tmp_path):
        with patch.object(pdf_generator, "layout_letter", side_effect=RuntimeError("boom")):
            with pytest.raises(ExportError, match="Failed to generate PDF: boom"):
                export_pdf(sample_letter(), tmp_path)

        assert list(tmp_path.iterdir()) == []


class TestEnsurePdfBackend:
    """Tests for lazy backend loading."""

    def test_memoized(self):
        assert ensure_pdf_backend() is ensure_pdf_backend()

    def test_failure_not_cached(self):
        ensure_pdf_backend.cache_clear()
        with patch.object(pdf_generator.importlib, "import_module", side_effect=ImportError("offline")):
            with pytest.raises(ExportError):
                ensure_pdf_backend()

        assert ensure_pdf_backend().page_size is not None
