"""Command-line interface for cover letter generation and editing."""

import sys
from pathlib import Path

from dotenv import load_dotenv

from .errors import BusyError
from .letter import ParagraphType
from .logging_config import setup_logging
from .preferences import PreferenceStore
from .session import CoverLetterSession
from .ui_components import (
    DASH_LINE,
    SEPARATOR_LINE,
    confirm,
    get_paragraph_index,
    get_user_choice,
    print_divider,
    print_header,
    read_line,
    read_multiline_input,
    show_letter,
)
from .utils import get_output_directory

# Load environment variables
load_dotenv()


def print_welcome():
    """Print welcome message."""
    print_header("Cover Letter Studio")
    print("\nThis tool writes a tailored cover letter from your resume and a job description.")
    print("\nInstructions:")
    print("  1. Enter your Groq API key, name, salutation and closing")
    print("  2. Load your resume (PDF or TXT) and paste the job description")
    print("  3. Generate, review and refine the letter, then save it as DOCX or PDF")
    print("\nType 'quit' or 'exit' at any menu to exit the program.")
    print(SEPARATOR_LINE + "\n")


def print_error(session: CoverLetterSession) -> bool:
    """Print the session's current error, if any."""
    if session.error:
        print(f"\n⚠ {session.error}")
        return True
    return False


def mask_secret(value: str) -> str:
    if not value:
        return "(not set)"
    if len(value) <= 8:
        return "*" * len(value)
    return f"{value[:4]}...{value[-4:]}"


def show_inputs(store: PreferenceStore):
    """Display the current inputs."""
    print_header("CURRENT INPUTS")
    print(f"\nAPI key:          {mask_secret(store.get('api_key'))}")
    print(f"Your name:        {store.get('user_name') or '(not set)'}")
    print(f"Salutation:       {store.get('salutation') or '(not set)'}")
    print(f"Closing:          {store.get('closing') or '(not set)'}")
    file_name = store.get("file_name")
    print(f"Resume:           {len(store.get('resume_text'))} characters"
          + (f" (from {file_name})" if file_name else ""))
    print(f"Job description:  {len(store.get('job_description'))} characters")
    print(DASH_LINE)


def edit_inputs(store: PreferenceStore):
    """Edit the single-line inputs, keeping current values on empty input."""
    print_divider()
    print("Press Enter to keep the current value.")

    for key, label in (
        ("api_key", "Groq API key"),
        ("user_name", "Your name"),
        ("salutation", "Salutation"),
        ("closing", "Closing"),
    ):
        value = read_line(label, default=store.get(key))
        if value is None:
            print("Cancelled.")
            return
        store.set(key, value)

    print("✓ Inputs saved")


def edit_job_description(store: PreferenceStore):
    """Replace the job description."""
    text = read_multiline_input("\nPaste the job description:", default=store.get("job_description"))
    if text is None:
        return
    store.set("job_description", text)
    print(f"✓ Job description saved ({len(text)} characters)")


def load_resume_file(session: CoverLetterSession):
    """Read resume text from a PDF or TXT file."""
    raw_path = read_line("Path to resume (PDF or TXT)")
    if not raw_path:
        return

    path = Path(raw_path.strip('"').strip("'")).expanduser()
    print(f"\nReading {path.name}...")
    text = session.load_resume(path)
    if text is None:
        print_error(session)
        return
    print(f"✓ Resume loaded ({len(text)} characters)")


def paste_resume_text(session: CoverLetterSession):
    """Replace the resume with pasted text."""
    text = read_multiline_input("\nPaste your resume text:", default=session.store.get("resume_text"))
    if text is None:
        return
    session.set_resume_text(text)
    session.store.set("file_name", "")
    print(f"✓ Resume saved ({len(text)} characters)")


def generate_letter(session: CoverLetterSession) -> bool:
    """Generate a new letter and show it."""
    print("\nGenerating your cover letter...")
    letter = session.generate()
    if print_error(session):
        return False

    show_letter(letter, numbered=False)
    return not letter.is_empty


def edit_paragraph(session: CoverLetterSession):
    """Edit one paragraph in place."""
    index = get_paragraph_index(session.letter)
    if index is None:
        return

    session.begin_edit(index)
    text = read_multiline_input("\nEdit the paragraph:", default=session.letter[index].text)
    if text:
        session.update_text(index, text)
        print("✓ Paragraph updated")
    else:
        print("Keeping current text.")
    session.commit_edit(index)


def delete_paragraph(session: CoverLetterSession):
    """Delete a body paragraph after confirmation."""
    index = get_paragraph_index(session.letter)
    if index is None:
        return

    if session.letter[index].type is not ParagraphType.CONTENT:
        print("The salutation, closing and name cannot be deleted.")
        return

    before = len(session.letter)
    session.delete(index, confirm=lambda: confirm("Are you sure you want to delete this paragraph?"))
    if len(session.letter) < before:
        print("✓ Paragraph deleted")


def add_paragraph(session: CoverLetterSession):
    """Insert a new body paragraph and edit it straight away."""
    index = get_paragraph_index(
        session.letter, "Add below paragraph number (0 = before the first paragraph)", minimum=0
    )
    if index is None:
        return

    session.insert_after(index)
    new_index = session.letter.editing_indices()[-1]
    text = read_multiline_input("\nWrite the new paragraph:", default=session.letter[new_index].text)
    if text:
        session.update_text(new_index, text)
    session.commit_edit(new_index)
    print("✓ Paragraph added")


def save_letter(session: CoverLetterSession, fmt: str):
    """Save the letter in the requested format."""
    output_dir = get_output_directory()
    if fmt == "pdf":
        path = session.export_pdf(output_dir)
    else:
        path = session.export_docx(output_dir, native=(fmt == "native"))

    if print_error(session):
        return
    if path is None:
        print("\nNothing to save yet.")
        return
    print(f"\n✓ Cover letter saved: {path}")


def handle_review_loop(session: CoverLetterSession):
    """Review, edit and export the current letter."""
    while True:
        show_letter(session.letter)

        print("\nOptions:")
        print("  (1) Edit a paragraph")
        print("  (2) Delete a paragraph")
        print("  (3) Add a paragraph")
        print("  (4) Save as DOCX")
        print("  (5) Save as PDF")
        print("  (6) Save as native Word document")
        print("  (7) Copy to clipboard")
        print("  (8) Regenerate")
        print("  (9) Back to main menu")

        choice = get_user_choice(["1", "2", "3", "4", "5", "6", "7", "8", "9"], default="4")

        if choice == "1":
            edit_paragraph(session)
        elif choice == "2":
            delete_paragraph(session)
        elif choice == "3":
            add_paragraph(session)
        elif choice == "4":
            save_letter(session, "docx")
        elif choice == "5":
            save_letter(session, "pdf")
        elif choice == "6":
            save_letter(session, "native")
        elif choice == "7":
            if session.copy_text():
                print("\n✓ Copied to clipboard!")
            else:
                print_error(session)
        elif choice == "8":
            if not generate_letter(session):
                return
        else:
            return


def main():
    """Main CLI function."""
    setup_logging()
    store = PreferenceStore()
    session = CoverLetterSession(store)

    try:
        print_welcome()

        while True:
            show_inputs(store)
            print("\nOptions:")
            print("  (1) Edit API key, name, salutation and closing")
            print("  (2) Load resume from file")
            print("  (3) Paste resume text")
            print("  (4) Enter job description")
            print("  (5) Generate cover letter")
            print("  (6) Review & refine current letter")
            print("  (7) Exit")

            choice = get_user_choice(["1", "2", "3", "4", "5", "6", "7"], default="5")

            try:
                if choice == "1":
                    edit_inputs(store)
                elif choice == "2":
                    load_resume_file(session)
                elif choice == "3":
                    paste_resume_text(session)
                elif choice == "4":
                    edit_job_description(store)
                elif choice == "5":
                    if generate_letter(session):
                        handle_review_loop(session)
                elif choice == "6":
                    if session.letter.is_empty:
                        print("\nNo letter yet. Generate one first.")
                    else:
                        handle_review_loop(session)
                else:
                    print("\nExiting...")
                    break
            except BusyError as e:
                print(f"\n⚠ {e}")

    except KeyboardInterrupt:
        print("\n\nExiting...")
        sys.exit(0)
    finally:
        session.close()


if __name__ == "__main__":
    main()
