"""Per-page text extraction on top of a pluggable PDF decode engine.

The decode engine only has to turn a byte buffer into a page count and, for
each page, an ordered list of :class:`TextRun`.  Everything else (whitespace
normalization, rebuilding visual lines, progress reporting) lives here so the
engine can be swapped without touching the comparison code.  PyMuPDF is the
default engine.
"""
from __future__ import annotations

import asyncio
import functools
import importlib
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Protocol

from .errors import DecodeError, EngineUnavailable
from .progress import ProgressCallback, ProgressEvent
from .text import normalize_text

logger = logging.getLogger(__name__)

MIN_PYMUPDF_VERSION = (1, 22)


@dataclass(frozen=True)
class TextRun:
    """Contiguous string from a page's text layer."""

    text: str
    has_eol: bool = False


class OpenedDocument(Protocol):
    page_count: int

    def iter_page_runs(self, index: int) -> Iterable[TextRun]:
        ...

    def close(self) -> None:
        ...


class PdfBackend(Protocol):
    def open(self, data: bytes, on_progress: Optional[ProgressCallback] = None) -> OpenedDocument:
        ...


def fold_runs_into_lines(runs: Iterable[TextRun]) -> str:
    """Rebuild the visual lines of a page from its text runs.

    Runs are normalized and joined with single spaces until one carries an
    end-of-line hint.  The line still in progress after the last run is always
    flushed because engines rarely mark the final run of a page.
    """

    lines: List[str] = []
    current: List[str] = []
    for run in runs:
        normalized = normalize_text(run.text)
        if not normalized:
            continue
        current.append(normalized)
        if run.has_eol:
            lines.append(" ".join(current))
            current = []
    if current:
        lines.append(" ".join(current))
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# PyMuPDF engine
# ---------------------------------------------------------------------------


def _version_tuple(fitz) -> tuple:
    version_str = getattr(fitz, "VersionBind", None)
    if not version_str:
        try:
            version_str = fitz.__doc__.split()[1]
        except (AttributeError, IndexError):
            version_str = "0"
    parts = []
    for part in version_str.split(".")[:2]:
        digits = "".join(ch for ch in part if ch.isdigit())
        parts.append(int(digits or 0))
    return tuple(parts)


class _PyMuPDFDocument:
    def __init__(self, document, flags: Optional[int] = None) -> None:
        self._document = document
        self._flags = flags
        self.page_count = document.page_count

    def iter_page_runs(self, index: int) -> Iterator[TextRun]:
        try:
            page = self._document[index]
            blocks = page.get_text("dict", flags=self._flags).get("blocks", [])
        except (RuntimeError, ValueError) as exc:
            raise DecodeError(f"Cannot read text of page {index + 1}: {exc}") from exc
        for block in blocks:
            if block.get("type", 0) != 0:
                continue
            for line in block.get("lines", []):
                texts = [span.get("text", "") for span in line.get("spans", [])]
                # blank trailing spans do not carry the end of line
                last = max((seq for seq, text in enumerate(texts) if text.strip()), default=-1)
                for seq, text in enumerate(texts):
                    yield TextRun(text, has_eol=seq == last)

    def close(self) -> None:
        self._document.close()


class PyMuPDFBackend:
    """Decode engine backed by PyMuPDF (``fitz``)."""

    def __init__(self, fitz) -> None:
        self._fitz = fitz

    @property
    def version(self) -> tuple:
        return _version_tuple(self._fitz)

    def open(self, data: bytes, on_progress: Optional[ProgressCallback] = None) -> _PyMuPDFDocument:
        try:
            document = self._fitz.open(stream=data, filetype="pdf")
        except (RuntimeError, ValueError) as exc:
            raise DecodeError(f"Not a readable PDF: {exc}") from exc

        if document.needs_pass and not document.authenticate(""):
            document.close()
            raise DecodeError("PDF is encrypted and cannot be opened without a password")

        if on_progress is not None:
            on_progress(ProgressEvent("loading", len(data), len(data)))
        return _PyMuPDFDocument(document, getattr(self._fitz, "TEXTFLAGS_TEXT", None))


@functools.lru_cache(maxsize=None)
def load_engine() -> PyMuPDFBackend:
    """Initialise the default decode engine once per process."""

    try:
        fitz = importlib.import_module("fitz")
    except ImportError as exc:
        raise EngineUnavailable("PyMuPDF is not installed") from exc

    backend = PyMuPDFBackend(fitz)
    if backend.version < MIN_PYMUPDF_VERSION:
        found = ".".join(str(part) for part in backend.version)
        raise EngineUnavailable(f"PyMuPDF >=1.22 required, found {found}")
    logger.debug("PDF engine ready: PyMuPDF %s", backend.version)
    return backend


# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------


def read_document(
    path: str | Path,
    on_progress: Optional[ProgressCallback] = None,
    chunk_size: int = 64 * 1024,
) -> bytes:
    """Read a local file, reporting ``loading`` progress per chunk."""

    total = os.path.getsize(path)
    buffer = bytearray()
    with open(path, "rb") as handle:
        while True:
            chunk = handle.read(chunk_size)
            if not chunk:
                break
            buffer.extend(chunk)
            if on_progress is not None:
                on_progress(ProgressEvent("loading", len(buffer), total))
    return bytes(buffer)


def _open(
    data: bytes,
    on_progress: Optional[ProgressCallback],
    backend: Optional[PdfBackend],
) -> OpenedDocument:
    engine = backend if backend is not None else load_engine()
    return engine.open(data, on_progress)


def _iter_pages(document: OpenedDocument, on_progress: Optional[ProgressCallback]) -> Iterator[str]:
    total = document.page_count
    logger.debug("Extracting text from %d page(s)", total)
    for index in range(total):
        yield fold_runs_into_lines(document.iter_page_runs(index))
        if on_progress is not None:
            on_progress(ProgressEvent("pages", index + 1, total))


def extract_text(
    data: bytes,
    on_progress: Optional[ProgressCallback] = None,
    backend: Optional[PdfBackend] = None,
) -> List[str]:
    """Return one newline-joined text block per page of ``data``."""

    document = _open(data, on_progress, backend)
    try:
        return list(_iter_pages(document, on_progress))
    finally:
        document.close()


async def extract_text_async(
    data: bytes,
    on_progress: Optional[ProgressCallback] = None,
    backend: Optional[PdfBackend] = None,
) -> List[str]:
    """Coroutine form of :func:`extract_text`.

    Control is handed back to the event loop once the document is open and
    after every page so two extractions can progress side by side.
    """

    document = _open(data, on_progress, backend)
    try:
        await asyncio.sleep(0)
        pages: List[str] = []
        for page_text in _iter_pages(document, on_progress):
            pages.append(page_text)
            await asyncio.sleep(0)
        return pages
    finally:
        document.close()
