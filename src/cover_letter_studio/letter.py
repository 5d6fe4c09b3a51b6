"""Letter data model and the paragraph editing operations."""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Iterator, List, Optional, Sequence, Tuple

NEW_PARAGRAPH_TEXT = "New paragraph..."
PARAGRAPH_SEPARATOR = "\n\n"


class ParagraphType(Enum):
    """Role of a paragraph in the letter."""
    SALUTATION = "salutation"
    CONTENT = "content"
    CLOSING = "closing"
    NAME = "name"


PROTECTED_TYPES = (ParagraphType.SALUTATION, ParagraphType.CLOSING, ParagraphType.NAME)


@dataclass(frozen=True)
class LetterParagraph:
    """One paragraph-level unit of the letter, tagged with its role."""
    text: str
    type: ParagraphType = ParagraphType.CONTENT
    editing: bool = False


@dataclass(frozen=True)
class Letter:
    """An ordered letter kept as three segments.

    ``head`` holds the salutation, ``body`` the content paragraphs and
    ``tail`` the closing followed by the signer name. Indices used by the
    editing methods address the flattened sequence ``head + body + tail``.
    Every method returns a new Letter; instances are never mutated.
    """
    head: Tuple[LetterParagraph, ...] = ()
    body: Tuple[LetterParagraph, ...] = ()
    tail: Tuple[LetterParagraph, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "head", tuple(self.head))
        object.__setattr__(self, "body", tuple(self.body))
        object.__setattr__(self, "tail", tuple(self.tail))

        if len(self.head) > 1 or any(p.type is not ParagraphType.SALUTATION for p in self.head):
            raise ValueError("Letter head may only hold a single salutation")
        if any(p.type is not ParagraphType.CONTENT for p in self.body):
            raise ValueError("Letter body may only hold content paragraphs")

        tail_types = [p.type for p in self.tail]
        if tail_types not in ([], [ParagraphType.CLOSING], [ParagraphType.NAME],
                              [ParagraphType.CLOSING, ParagraphType.NAME]):
            raise ValueError("Letter tail must be an optional closing followed by an optional name")

    @classmethod
    def from_paragraphs(cls, paragraphs: Sequence[LetterParagraph]) -> "Letter":
        """Build a letter from a flat, already ordered paragraph list."""
        head = [p for p in paragraphs if p.type is ParagraphType.SALUTATION]
        body = [p for p in paragraphs if p.type is ParagraphType.CONTENT]
        tail = [p for p in paragraphs if p.type in (ParagraphType.CLOSING, ParagraphType.NAME)]
        letter = cls(head=tuple(head), body=tuple(body), tail=tuple(tail))
        if letter.paragraphs != list(paragraphs):
            raise ValueError("Paragraphs are not in salutation, content, closing, name order")
        return letter

    @property
    def paragraphs(self) -> List[LetterParagraph]:
        return list(self.head + self.body + self.tail)

    @property
    def is_empty(self) -> bool:
        return not (self.head or self.body or self.tail)

    def __len__(self) -> int:
        return len(self.head) + len(self.body) + len(self.tail)

    def __iter__(self) -> Iterator[LetterParagraph]:
        return iter(self.head + self.body + self.tail)

    def __getitem__(self, index: int) -> LetterParagraph:
        return self.paragraphs[self._check_index(index)]

    def full_text(self) -> str:
        """Return every paragraph's text joined by blank lines."""
        return PARAGRAPH_SEPARATOR.join(p.text for p in self)

    def _check_index(self, index: int) -> int:
        if not 0 <= index < len(self):
            raise IndexError(f"No paragraph at index {index}")
        return index

    def _with_paragraph(self, index: int, paragraph: LetterParagraph) -> "Letter":
        """Return a copy with the paragraph at a flat index replaced."""
        self._check_index(index)
        head_len, body_len = len(self.head), len(self.body)

        if index < head_len:
            return replace(self, head=(paragraph,))
        if index < head_len + body_len:
            pos = index - head_len
            return replace(self, body=self.body[:pos] + (paragraph,) + self.body[pos + 1:])

        pos = index - head_len - body_len
        return replace(self, tail=self.tail[:pos] + (paragraph,) + self.tail[pos + 1:])

    def begin_edit(self, index: int) -> "Letter":
        """Put the paragraph at ``index`` into inline-edit mode."""
        return self._with_paragraph(index, replace(self[index], editing=True))

    def update_text(self, index: int, text: str) -> "Letter":
        """Replace the text of the paragraph at ``index``."""
        return self._with_paragraph(index, replace(self[index], text=text))

    def commit_edit(self, index: int) -> "Letter":
        """Leave inline-edit mode for the paragraph at ``index``."""
        return self._with_paragraph(index, replace(self[index], editing=False))

    def delete(self, index: int, confirm: Optional[Callable[[], bool]] = None) -> "Letter":
        """Remove a content paragraph.

        Salutation, closing and name paragraphs are never removed. When
        ``confirm`` is given it is asked first and a falsy answer leaves the
        letter unchanged.

        Args:
            index: Flat index of the paragraph to remove
            confirm: Optional callable returning True to proceed

        Returns:
            The letter without the paragraph, or the same letter on a no-op
        """
        paragraph = self[index]
        if paragraph.type in PROTECTED_TYPES:
            return self
        if confirm is not None and not confirm():
            return self

        pos = index - len(self.head)
        return replace(self, body=self.body[:pos] + self.body[pos + 1:])

    def insert_after(self, index: int, text: str = NEW_PARAGRAPH_TEXT) -> "Letter":
        """Insert a new content paragraph, in edit mode, after ``index``.

        The new paragraph always lands in the body. Asking for a position at
        or past the closing or name puts it at the end of the body; ``-1``
        or the salutation's index puts it first in the body.
        """
        head_len, body_len = len(self.head), len(self.body)

        if index < head_len:
            pos = 0
        elif index < head_len + body_len:
            pos = index - head_len + 1
        else:
            pos = body_len

        new_paragraph = LetterParagraph(text=text, type=ParagraphType.CONTENT, editing=True)
        return replace(self, body=self.body[:pos] + (new_paragraph,) + self.body[pos:])

    def editing_indices(self) -> List[int]:
        return [i for i, p in enumerate(self) if p.editing]
