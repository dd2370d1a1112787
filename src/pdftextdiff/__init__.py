"""Find the text a newer PDF adds over an older revision."""

from __future__ import annotations

__version__ = "0.3.0"

from .compare import ComparisonResult, compare_documents, compare_files
from .diff import DifferenceRecord, diff_pages, page_unique_lines, similarity
from .errors import ComparisonError, DecodeError, EngineUnavailable, PdfTextDiffError
from .extraction import TextRun, extract_text, extract_text_async, load_engine
from .presets import DiffParams, get_preset, iter_presets

__all__ = [
    "compare_documents",
    "compare_files",
    "ComparisonResult",
    "DifferenceRecord",
    "diff_pages",
    "page_unique_lines",
    "similarity",
    "extract_text",
    "extract_text_async",
    "load_engine",
    "TextRun",
    "DiffParams",
    "get_preset",
    "iter_presets",
    "PdfTextDiffError",
    "DecodeError",
    "EngineUnavailable",
    "ComparisonError",
]
