"""Tests for the editing session that ties the pieces together."""

from unittest.mock import MagicMock, patch

import pyperclip
import pytest

from src.cover_letter_studio.errors import BusyError, ExportError, GenerationError
from src.cover_letter_studio.letter import ParagraphType
from src.cover_letter_studio.preferences import PreferenceStore
from src.cover_letter_studio.session import REQUIRED_FIELDS_MESSAGE, CoverLetterSession

RAW_BODY = "Here is your letter:\n\nFirst paragraph.\n\nSecond paragraph."


@pytest.fixture
def store(tmp_path):
    with patch.dict("os.environ", {}, clear=True):
        store = PreferenceStore(tmp_path / "preferences.json")
    store.set("api_key", "gsk_test")
    store.set("user_name", "Jane Doe")
    store.set("resume_text", "Resume text")
    store.set("job_description", "Job description")
    return store


@pytest.fixture
def generator():
    generator = MagicMock()
    generator.generate_body.return_value = RAW_BODY
    return generator


@pytest.fixture
def session(store, generator):
    factory = MagicMock(return_value=generator)
    session = CoverLetterSession(store, generator_factory=factory)
    yield session
    session.close()


class TestGenerate:
    """Tests for generating and rebuilding the letter."""

    def test_generate_builds_letter(self, session, generator):
        letter = session.generate()

        assert [p.text for p in letter] == [
            "Dear Hiring Manager,",
            "First paragraph.",
            "Second paragraph.",
            "Sincerely,",
            "Jane Doe",
        ]
        assert session.error == ""
        assert session.is_loading is False
        session.generator_factory.assert_called_once_with("gsk_test")
        generator.generate_body.assert_called_once_with("Resume text", "Job description")

    @pytest.mark.parametrize("field", [
        "resume_text", "job_description", "api_key", "user_name", "salutation", "closing",
    ])
    def test_missing_field_blocks_generation(self, session, store, field):
        store.set(field, "  ")

        letter = session.generate()

        assert letter.is_empty
        assert session.error == REQUIRED_FIELDS_MESSAGE
        session.generator_factory.assert_not_called()

    def test_generation_failure_sets_error(self, session, generator):
        session.generate()
        generator.generate_body.side_effect = GenerationError("Failed to generate cover letter: API Error: invalid_api_key")

        letter = session.generate()

        assert letter.is_empty
        assert "invalid_api_key" in session.error
        assert session.is_loading is False

    def test_success_clears_previous_error(self, session, generator):
        generator.generate_body.side_effect = [GenerationError("boom"), RAW_BODY]

        session.generate()
        assert session.error == "boom"

        session.generate()
        assert session.error == ""
        assert len(session.letter) == 5

    def test_preference_change_rebuilds_and_discards_edits(self, session, store):
        session.generate()
        session.update_text(1, "Edited.")

        store.set("closing", "Best regards,")

        assert session.letter[1].text == "First paragraph."
        assert session.letter[3].text == "Best regards,"

    def test_clearing_name_drops_name_record(self, session, store):
        session.generate()
        store.set("user_name", "")
        assert session.letter.paragraphs[-1].type is ParagraphType.CLOSING

    def test_unrelated_preference_keeps_edits(self, session, store):
        session.generate()
        session.update_text(1, "Edited.")

        store.set("theme", "dark")

        assert session.letter[1].text == "Edited."

    def test_busy_guard(self, session):
        session.is_loading = True
        with pytest.raises(BusyError):
            session.generate()


class TestEditing:
    """Tests for the editing passthroughs."""

    def test_edit_cycle(self, session):
        session.generate()
        session.begin_edit(2)
        assert session.letter[2].editing

        session.update_text(2, "New text.")
        session.commit_edit(2)

        assert session.letter[2].text == "New text."
        assert not session.letter[2].editing

    def test_delete_and_insert(self, session):
        session.generate()

        session.delete(1, confirm=lambda: True)
        assert len(session.letter) == 4

        session.delete(0, confirm=lambda: True)
        assert len(session.letter) == 4

        session.insert_after(3)
        assert session.letter[2].type is ParagraphType.CONTENT
        assert session.letter[2].editing


class TestLoadResume:
    """Tests for resume loading."""

    def test_load_text_file(self, session, store, tmp_path):
        path = tmp_path / "resume.txt"
        path.write_text("Loaded resume", encoding="utf-8")

        assert session.load_resume(path) == "Loaded resume"
        assert store.get("resume_text") == "Loaded resume"
        assert store.get("file_name") == "resume.txt"
        assert session.upload_progress == 0
        assert session.error == ""

    def test_unsupported_file_clears_state(self, session, store, tmp_path):
        path = tmp_path / "resume.docx"
        path.write_bytes(b"data")

        assert session.load_resume(path) is None
        assert "Unsupported file type" in session.error
        assert store.get("file_name") == ""
        assert store.get("resume_text") == ""
        assert session.upload_progress == 0
        assert session.is_loading is False

    def test_pdf_parser_crash_clears_state(self, session, store, tmp_path):
        path = tmp_path / "resume.pdf"
        path.write_bytes(b"%PDF-1.4 damaged")

        with patch("src.cover_letter_studio.resume_reader.PdfReader",
                   side_effect=AttributeError("'NameObject' object has no attribute 'items'")):
            assert session.load_resume(path) is None

        assert session.error.startswith("Failed to process PDF:")
        assert store.get("file_name") == ""
        assert store.get("resume_text") == ""
        assert session.upload_progress == 0
        assert session.is_loading is False


class TestExports:
    """Tests for exporting from the session."""

    def test_export_docx_uses_name(self, session, tmp_path):
        session.generate()

        path = session.export_docx(tmp_path)

        assert path.name == "Jane_Doe_Cover_Letter.docx"
        assert session.error == ""

    def test_export_native_docx(self, session, tmp_path):
        session.generate()
        path = session.export_docx(tmp_path, native=True)
        assert path.read_bytes()[:2] == b"PK"

    def test_export_pdf(self, session, tmp_path):
        session.generate()

        path = session.export_pdf(tmp_path)

        assert path.name == "Jane_Doe_Cover_Letter.pdf"
        assert path.read_bytes().startswith(b"%PDF")
        assert session.is_loading is False

    def test_export_pdf_failure_sets_error(self, session, tmp_path):
        session.generate()
        with patch("src.cover_letter_studio.session.export_pdf",
                   side_effect=ExportError("Failed to load PDF generation library.")):
            assert session.export_pdf(tmp_path) is None

        assert session.error.startswith("Failed to download PDF:")

    def test_export_empty_letter(self, session, tmp_path):
        assert session.export_pdf(tmp_path) is None
        assert session.export_docx(tmp_path) is None


class TestCopyText:
    """Tests for clipboard copy."""

    @patch("src.cover_letter_studio.session.pyperclip.copy")
    def test_copy_full_text(self, mock_copy, session):
        session.generate()

        assert session.copy_text() is True
        mock_copy.assert_called_once_with(session.letter.full_text())

    @patch("src.cover_letter_studio.session.pyperclip.copy")
    def test_copy_failure(self, mock_copy, session):
        mock_copy.side_effect = pyperclip.PyperclipException("no clipboard")

        assert session.copy_text() is False
        assert session.error == "Failed to copy text to clipboard."
