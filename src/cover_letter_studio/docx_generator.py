"""Word document export for cover letters."""

import html
from pathlib import Path
from typing import Optional

from docx import Document
from docx.shared import Inches, Pt

from .errors import ExportError
from .letter import Letter, ParagraphType
from .logging_config import get_logger
from .utils import ensure_directory

logger = get_logger("docx_generator")

WORD_MIME_TYPE = "application/msword"
DEFAULT_DOCX_FILENAME = "Cover_Letter.docx"

# Byte order mark so Word picks up UTF-8
UTF8_BOM = "\ufeff"

WORD_HTML_TEMPLATE = """<!DOCTYPE html>
<html xmlns:o="urn:schemas-microsoft-com:office:office"
      xmlns:w="urn:schemas-microsoft-com:office:word"
      xmlns="http://www.w3.org/TR/REC-html40">
<head>
<meta charset="utf-8">
<title>Cover Letter</title>
<style>
  body {{ font-family: 'Calibri', sans-serif; font-size: 11pt; line-height: 1.15; margin: 1in; }}
  p {{ margin-bottom: 10pt; margin-top: 0; }}
  .salutation {{ margin-bottom: 12pt; }}
  .closing {{ margin-top: 12pt; margin-bottom: 4pt; }}
  .name {{ font-weight: normal; margin-top: 0; }}
</style>
</head>
<body>
{body}
</body>
</html>
"""

# CSS class per paragraph role; content paragraphs use the plain <p> style
PARAGRAPH_CLASSES = {
    ParagraphType.SALUTATION: "salutation",
    ParagraphType.CONTENT: "",
    ParagraphType.CLOSING: "closing",
    ParagraphType.NAME: "name",
}

# Space before/after in points for the native .docx, matching the HTML styles
DOCX_SPACING = {
    ParagraphType.SALUTATION: (0, 12),
    ParagraphType.CONTENT: (0, 10),
    ParagraphType.CLOSING: (12, 4),
    ParagraphType.NAME: (0, 10),
}


def build_word_html(letter: Letter) -> str:
    """Render a letter as Word-compatible HTML markup.

    The mapping is deterministic: the same letter always yields the same
    string.

    Args:
        letter: The letter to render

    Returns:
        HTML document with one <p> per paragraph, classed by role
    """
    rendered = []
    for paragraph in letter:
        css_class = PARAGRAPH_CLASSES[paragraph.type]
        text = html.escape(paragraph.text, quote=False).replace("\n", "<br/>")
        rendered.append(f'<p class="{css_class}">{text}</p>')

    return WORD_HTML_TEMPLATE.format(body="\n".join(rendered))


def export_word_document(
    letter: Letter,
    output_dir: Path = None,
    filename: str = DEFAULT_DOCX_FILENAME,
) -> Optional[Path]:
    """Write the letter as an HTML-based document that Word opens directly.

    Args:
        letter: The letter to export
        output_dir: Directory to save into (default: OUTPUT_DIR)
        filename: File name (default: Cover_Letter.docx)

    Returns:
        Path to the written file, or None for an empty letter
    """
    if letter.is_empty:
        return None

    content = UTF8_BOM + build_word_html(letter)

    try:
        output_path = ensure_directory(output_dir) / filename
        output_path.write_bytes(content.encode("utf-8"))
    except OSError as e:
        raise ExportError(f"Failed to write Word document: {e}") from e

    logger.info("Saved Word document to %s", output_path)
    return output_path


def generate_cover_letter_docx(
    letter: Letter,
    output_dir: Path = None,
    filename: str = DEFAULT_DOCX_FILENAME,
) -> Optional[Path]:
    """Generate a native Office Open XML cover letter with python-docx.

    Args:
        letter: The letter to export
        output_dir: Directory to save the DOCX (default: OUTPUT_DIR)
        filename: Custom filename (default: Cover_Letter.docx)

    Returns:
        Path to the generated DOCX, or None for an empty letter
    """
    if letter.is_empty:
        return None

    doc = Document()

    # Set margins to match the HTML export
    for section in doc.sections:
        section.top_margin = Inches(1)
        section.bottom_margin = Inches(1)
        section.left_margin = Inches(1)
        section.right_margin = Inches(1)

    for paragraph in letter:
        para = doc.add_paragraph()
        lines = paragraph.text.split("\n")
        run = para.add_run(lines[0])
        # Embedded newlines become soft line breaks inside the paragraph
        for line in lines[1:]:
            run.add_break()
            run = para.add_run(line)

        for r in para.runs:
            r.font.name = "Calibri"
            r.font.size = Pt(11)

        space_before, space_after = DOCX_SPACING[paragraph.type]
        para_format = para.paragraph_format
        para_format.space_before = Pt(space_before)
        para_format.space_after = Pt(space_after)
        para_format.line_spacing = 1.15

    try:
        output_path = ensure_directory(output_dir) / filename
        doc.save(str(output_path))
    except OSError as e:
        raise ExportError(f"Failed to write DOCX: {e}") from e

    logger.info("Saved DOCX to %s", output_path)
    return output_path
