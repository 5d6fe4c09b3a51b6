"""User interface components for the CLI."""

from typing import List, Optional

from prompt_toolkit import print_formatted_text, prompt
from prompt_toolkit.formatted_text import HTML
from prompt_toolkit.history import InMemoryHistory

from .letter import Letter, ParagraphType

# UI formatting constants
SEPARATOR_LINE = "=" * 80
DASH_LINE = "-" * 80

TYPE_LABELS = {
    ParagraphType.SALUTATION: "salutation",
    ParagraphType.CONTENT: "paragraph",
    ParagraphType.CLOSING: "closing",
    ParagraphType.NAME: "name",
}


def print_header(title: str):
    """Print a formatted header."""
    print("\n" + SEPARATOR_LINE)
    print(title)
    print(SEPARATOR_LINE)


def print_divider():
    """Print a divider line."""
    print("\n" + DASH_LINE)


def read_multiline_input(prompt_text: str, default: str = "") -> Optional[str]:
    """Read multiline input from the user.

    Args:
        prompt_text: Prompt to display to the user
        default: Text pre-filled in the editor

    Returns:
        The input text as a string, or None if cancelled
    """
    if prompt_text:
        print(prompt_text)

    print_formatted_text(
        HTML(
            "<b><style color='ansigray'>Press [Esc] followed by [Enter] to submit. Press [Ctrl-c] to cancel.</style></b>"
        )
    )
    try:
        text = prompt(
            "",
            multiline=True,
            default=default,
            mouse_support=False,  # Keep native terminal copy/paste working
            history=InMemoryHistory(),
        )
        return text.strip()
    except KeyboardInterrupt:
        print("\nCancelled.")
        return None
    except EOFError:
        return None


def read_line(prompt_text: str, default: str = "") -> Optional[str]:
    """Read a single line, pre-filled with ``default``."""
    try:
        return prompt(f"{prompt_text}: ", default=default, mouse_support=False).strip()
    except (KeyboardInterrupt, EOFError):
        return None


def get_user_choice(options: List[str], default: str = "1", prompt_text: str = "Choice") -> str:
    """Get a validated user choice from a list of options.

    Args:
        options: List of valid option strings (e.g. ['1', '2', '3'])
        default: Default option if user presses Enter
        prompt_text: Prompt text

    Returns:
        The selected option, or "q" if the user quits
    """
    while True:
        try:
            choice = prompt(f"\n{prompt_text} [{default}]: ", mouse_support=False).strip()
            choice = choice or default

            if choice in options:
                return choice
            if choice.lower() in ["quit", "exit", "q"]:
                return "q"
            print(f"Invalid choice. Please select from: {', '.join(options)}")
        except (KeyboardInterrupt, EOFError):
            return "q"


def confirm(question: str, default: bool = False) -> bool:
    """Ask a yes/no question."""
    suffix = "[Y/n]" if default else "[y/N]"
    try:
        answer = prompt(f"{question} {suffix} ", mouse_support=False).strip().lower()
    except (KeyboardInterrupt, EOFError):
        return False

    if not answer:
        return default
    return answer in ("y", "yes")


def get_paragraph_index(
    letter: Letter, prompt_text: str = "Paragraph number", minimum: int = 1
) -> Optional[int]:
    """Ask for a paragraph number as shown by show_letter.

    Returns:
        Zero-based index, or None if the input was empty or invalid
    """
    raw = read_line(prompt_text)
    if not raw:
        return None
    try:
        number = int(raw)
    except ValueError:
        print(f"Not a number: {raw}")
        return None

    if not minimum <= number <= len(letter):
        print(f"Please enter a number between {minimum} and {len(letter)}.")
        return None
    return number - 1


def show_letter(letter: Letter, numbered: bool = True):
    """Print the letter, optionally with paragraph numbers and roles."""
    print_header("YOUR COVER LETTER")

    if letter.is_empty:
        print("\nNo letter yet. Generate one first.")
        print(SEPARATOR_LINE)
        return

    for number, paragraph in enumerate(letter, start=1):
        if numbered:
            marker = " (editing)" if paragraph.editing else ""
            print(f"\n[{number}] {TYPE_LABELS[paragraph.type]}{marker}")
        else:
            print()
        print(paragraph.text)

    print(SEPARATOR_LINE)
