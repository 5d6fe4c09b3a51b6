"""Exception types raised by the cover letter studio."""


class CoverLetterError(Exception):
    """Base class for every error surfaced to the user.

    The message is always a human-readable string; callers display
    ``str(error)`` and never a traceback.
    """


class MissingInputError(CoverLetterError, ValueError):
    """A required field was empty. Raised before any external call."""


class UnsupportedFileTypeError(CoverLetterError, ValueError):
    """The resume file is neither a PDF nor plain text."""


class ResumeExtractionError(CoverLetterError):
    """The resume file could not be read or parsed."""


class GenerationError(CoverLetterError):
    """The generation endpoint failed or returned an unusable payload."""


class ExportError(CoverLetterError):
    """A document could not be rendered or written."""


class BusyError(CoverLetterError):
    """Another long-running operation is still in flight."""
