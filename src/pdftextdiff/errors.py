"""Custom exceptions used across pdftextdiff."""
from __future__ import annotations

from typing import Sequence, Tuple

__all__ = ["PdfTextDiffError", "DecodeError", "EngineUnavailable", "ComparisonError"]


class PdfTextDiffError(Exception):
    """Base class for all pdftextdiff errors."""

    pass


class DecodeError(PdfTextDiffError):
    """Raised when a byte buffer cannot be opened as a PDF document."""

    pass


class EngineUnavailable(PdfTextDiffError):
    """Raised when the PDF decode engine cannot be initialised."""

    pass


class ComparisonError(DecodeError):
    """Raised when a comparison is aborted because an extraction failed.

    ``failed`` holds the keys (``"latest"``, ``"outdated"``) of every document
    whose extraction raised.
    """

    def __init__(self, failed: Sequence[str], message: str | None = None) -> None:
        self.failed: Tuple[str, ...] = tuple(failed)
        if message is None:
            message = "Could not extract text from the %s PDF" % " and ".join(self.failed)
        super().__init__(message)
