"""Turn raw generated text into a structured letter."""

import re
from typing import List

from .letter import Letter, LetterParagraph, ParagraphType
from .logging_config import get_logger

logger = get_logger("assembly")

# Introductory phrases the model sometimes prepends despite the prompt.
# Matching runs up to the first colon on the opening line.
INTRO_PHRASES = (
    "okay",
    "ok",
    "sure",
    "certainly",
    "absolutely",
    "here is",
    "here's",
    "here’s",
    "i've created",
    "i’ve created",
    "i have created",
    "i've written",
    "i have written",
    "please find",
    "attached is",
    "below is",
)

_INTRO_PATTERN = re.compile(
    r"^\s*(?:" + "|".join(re.escape(p) for p in INTRO_PHRASES) + r")\b[^\n:]*:\s*",
    re.IGNORECASE,
)

# One or more blank (or whitespace-only) lines
_PARAGRAPH_BREAK = re.compile(r"\n[ \t]*\n\s*")


def strip_intro_phrases(text: str) -> str:
    """Remove a leading "Here is your cover letter:" style preamble.

    Best effort only: phrasings outside INTRO_PHRASES are left alone. The
    function is idempotent on text that has no preamble.

    Args:
        text: Raw text returned by the model

    Returns:
        Text with the preamble removed and surrounding whitespace trimmed
    """
    if not text:
        return ""

    cleaned = _INTRO_PATTERN.sub("", text, count=1)
    if cleaned != text:
        logger.debug("Stripped introductory phrase from generated text")
    return cleaned.strip()


def split_paragraphs(text: str) -> List[str]:
    """Split text on blank lines into trimmed, non-empty paragraphs."""
    return [p.strip() for p in _PARAGRAPH_BREAK.split(text.replace("\r\n", "\n")) if p.strip()]


def assemble_letter(
    raw_body: str,
    salutation: str = "",
    closing: str = "",
    user_name: str = "",
) -> Letter:
    """Build the editable letter from a raw generation result.

    Args:
        raw_body: Untouched text returned by the generation endpoint
        salutation: Greeting line, e.g. "Dear Hiring Manager,"
        closing: Closing line, e.g. "Sincerely,"
        user_name: Signer name

    Returns:
        Letter of salutation, content paragraphs, closing and name. Empty
        parts are skipped; an empty raw body yields an empty letter.
    """
    if not raw_body or not raw_body.strip():
        return Letter()

    paragraphs = split_paragraphs(strip_intro_phrases(raw_body))

    head = (LetterParagraph(salutation, ParagraphType.SALUTATION),) if salutation else ()
    body = tuple(LetterParagraph(p, ParagraphType.CONTENT) for p in paragraphs)
    tail = ()
    if closing:
        tail += (LetterParagraph(closing, ParagraphType.CLOSING),)
    if user_name:
        tail += (LetterParagraph(user_name, ParagraphType.NAME),)

    logger.info("Assembled letter with %d content paragraphs", len(body))
    return Letter(head=head, body=body, tail=tail)
