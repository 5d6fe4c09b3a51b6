"""Cover Letter Studio - generate, edit and export cover letters with Groq."""

__version__ = "0.1.0"

# Expose main classes and functions for external use
from .assembly import assemble_letter, split_paragraphs, strip_intro_phrases
from .docx_generator import build_word_html, export_word_document, generate_cover_letter_docx
from .errors import (
    CoverLetterError,
    ExportError,
    GenerationError,
    MissingInputError,
    ResumeExtractionError,
    UnsupportedFileTypeError,
)
from .generator import CoverLetterGenerator, generate_cover_letter_body
from .letter import Letter, LetterParagraph, ParagraphType
from .pdf_generator import export_pdf
from .preferences import PreferenceStore
from .resume_reader import read_resume_file
from .session import CoverLetterSession

__all__ = [
    "CoverLetterGenerator",
    "CoverLetterSession",
    "CoverLetterError",
    "ExportError",
    "GenerationError",
    "Letter",
    "LetterParagraph",
    "MissingInputError",
    "ParagraphType",
    "PreferenceStore",
    "ResumeExtractionError",
    "UnsupportedFileTypeError",
    "assemble_letter",
    "build_word_html",
    "export_pdf",
    "export_word_document",
    "generate_cover_letter_body",
    "generate_cover_letter_docx",
    "read_resume_file",
    "split_paragraphs",
    "strip_intro_phrases",
]
