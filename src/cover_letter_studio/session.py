"""Application state for one editing session."""

from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Optional

import pyperclip

from .assembly import assemble_letter
from .docx_generator import export_word_document, generate_cover_letter_docx
from .errors import BusyError, CoverLetterError
from .generator import CoverLetterGenerator
from .letter import Letter
from .logging_config import get_logger
from .pdf_generator import export_pdf
from .preferences import PreferenceStore
from .resume_reader import read_resume_file
from .utils import make_export_filename

logger = get_logger("session")

REQUIRED_FIELDS_MESSAGE = (
    "Please fill in all required fields (*) including API Key, Resume, "
    "Job Description, Name, Salutation, and Closing."
)

# Preferences whose change re-assembles the letter from the raw body
LETTER_FIELDS = ("salutation", "closing", "user_name")


class CoverLetterSession:
    """Owns the letter, the loading flag and the current error.

    Every long-running action sets ``is_loading`` for its duration and is
    refused while another is in flight. The most recent failure is kept
    in ``error`` as a plain message; a later success clears it.
    """

    def __init__(
        self,
        store: PreferenceStore,
        generator_factory: Callable[[str], CoverLetterGenerator] = CoverLetterGenerator,
    ):
        self.store = store
        self.generator_factory = generator_factory

        self.raw_body = ""
        self.letter = Letter()
        self.is_loading = False
        self.upload_progress = 0
        self.error = ""

        self._unsubscribe = store.subscribe(self._on_preference_change)

    def close(self) -> None:
        self._unsubscribe()

    def _on_preference_change(self, key: str, value: str) -> None:
        if key in LETTER_FIELDS:
            self.rebuild()

    @contextmanager
    def _busy(self):
        if self.is_loading:
            raise BusyError("Another operation is still in progress.")
        self.is_loading = True
        try:
            yield
        finally:
            self.is_loading = False

    def _set_progress(self, percent: int) -> None:
        self.upload_progress = percent

    def rebuild(self) -> Letter:
        """Re-assemble the letter from the raw body; edits are discarded."""
        self.letter = assemble_letter(
            self.raw_body,
            salutation=self.store.get("salutation"),
            closing=self.store.get("closing"),
            user_name=self.store.get("user_name"),
        )
        return self.letter

    def set_resume_text(self, text: str) -> None:
        self.store.set("resume_text", text)

    def load_resume(self, file_path: Path) -> Optional[str]:
        """Read resume text from a file into the preferences.

        Returns:
            The extracted text, or None on failure (see ``error``)
        """
        file_path = Path(file_path)
        with self._busy():
            self.store.set("file_name", file_path.name)
            self.store.set("resume_text", "")
            self.error = ""
            self.upload_progress = 0

            try:
                text = read_resume_file(file_path, on_progress=self._set_progress)
            except CoverLetterError as e:
                logger.warning("Resume upload failed: %s", e)
                self.error = str(e)
                self.store.set("file_name", "")
                self.upload_progress = 0
                return None

            self.store.set("resume_text", text)
            self.upload_progress = 0
            return text

    def generate(self) -> Letter:
        """Generate a fresh letter from the stored inputs.

        Returns:
            The new letter; empty when generation failed (see ``error``)
        """
        values = self.store.as_dict()
        required = ("resume_text", "job_description", "api_key", "user_name", "salutation", "closing")
        if not all(values[key].strip() for key in required):
            self.error = REQUIRED_FIELDS_MESSAGE
            return self.letter

        with self._busy():
            self.error = ""
            self.raw_body = ""
            self.letter = Letter()

            try:
                generator = self.generator_factory(values["api_key"])
                self.raw_body = generator.generate_body(values["resume_text"], values["job_description"])
            except CoverLetterError as e:
                logger.error("Generation failed: %s", e)
                self.error = str(e)
                return self.letter

            return self.rebuild()

    # Editing operations replace the whole letter value

    def begin_edit(self, index: int) -> Letter:
        self.letter = self.letter.begin_edit(index)
        return self.letter

    def update_text(self, index: int, text: str) -> Letter:
        self.letter = self.letter.update_text(index, text)
        return self.letter

    def commit_edit(self, index: int) -> Letter:
        self.letter = self.letter.commit_edit(index)
        return self.letter

    def delete(self, index: int, confirm: Callable[[], bool] = None) -> Letter:
        self.letter = self.letter.delete(index, confirm=confirm)
        return self.letter

    def insert_after(self, index: int) -> Letter:
        self.letter = self.letter.insert_after(index)
        return self.letter

    def export_docx(self, output_dir: Path = None, native: bool = False) -> Optional[Path]:
        """Save the letter as a Word document.

        Args:
            output_dir: Target directory (default: OUTPUT_DIR)
            native: Write Office Open XML via python-docx instead of HTML
        """
        filename = make_export_filename(self.store.get("user_name"), "docx")
        export = generate_cover_letter_docx if native else export_word_document
        try:
            path = export(self.letter, output_dir, filename)
        except CoverLetterError as e:
            self.error = f"Failed to download DOCX: {e}"
            return None

        self.error = ""
        return path

    def export_pdf(self, output_dir: Path = None) -> Optional[Path]:
        """Save the letter as a paginated PDF."""
        with self._busy():
            self.error = ""
            filename = make_export_filename(self.store.get("user_name"), "pdf")
            try:
                return export_pdf(
                    self.letter, output_dir, filename, author=self.store.get("user_name") or None
                )
            except CoverLetterError as e:
                self.error = f"Failed to download PDF: {e}"
                return None

    def copy_text(self) -> bool:
        """Copy the full letter text to the clipboard."""
        try:
            pyperclip.copy(self.letter.full_text())
        except pyperclip.PyperclipException as e:
            logger.warning("Failed to copy text: %s", e)
            self.error = "Failed to copy text to clipboard."
            return False

        self.error = ""
        return True

