"""Utility functions for cover letter export and storage paths."""

import os
import re
from pathlib import Path
from typing import Optional

DEFAULT_BASE_NAME = "Cover_Letter"


def _clean_env_path(value: str) -> Path:
    # Remove quotes if present and expand ~ to home directory
    return Path(value.strip('"').strip("'")).expanduser().resolve()


def get_data_directory() -> Path:
    """Get the preference directory from environment or default location.

    Returns:
        Path: Resolved data directory path

    Examples:
        >>> # With DATA_DIR set to ~/Google Drive/Data
        >>> get_data_directory()
        PosixPath('/Users/username/Google Drive/Data')

        >>> # Without DATA_DIR
        >>> get_data_directory()
        PosixPath('/Users/username/.cover_letter_studio')
    """
    data_dir_env = os.getenv("DATA_DIR")
    if data_dir_env:
        return _clean_env_path(data_dir_env)

    return Path.home() / ".cover_letter_studio"


def get_output_directory() -> Path:
    """Get the directory exported letters are written to.

    Uses OUTPUT_DIR when set, otherwise ~/Documents/Cover Letters.
    """
    output_dir_env = os.getenv("OUTPUT_DIR")
    if output_dir_env:
        return _clean_env_path(output_dir_env)

    return Path.home() / "Documents" / "Cover Letters"


def make_export_filename(user_name: Optional[str], extension: str) -> str:
    """Create the download file name for a letter.

    Args:
        user_name: Signer name; whitespace runs become underscores
        extension: File extension without the dot, e.g. "pdf"

    Returns:
        A name like "Jane_Doe_Cover_Letter.pdf", or "Cover_Letter.pdf"
        when no name is set

    Examples:
        >>> make_export_filename("Jane  Doe", "docx")
        'Jane_Doe_Cover_Letter.docx'
    """
    clean_name = re.sub(r'[<>:"/\\|?*]', '', (user_name or "").strip())
    clean_name = re.sub(r"\s+", "_", clean_name)

    if clean_name:
        return f"{clean_name}_{DEFAULT_BASE_NAME}.{extension}"
    return f"{DEFAULT_BASE_NAME}.{extension}"


def ensure_directory(output_dir: Optional[Path]) -> Path:
    """Return an existing directory to write into, creating it if needed."""
    if output_dir is None:
        output_dir = get_output_directory()

    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir
