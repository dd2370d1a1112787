"""Run both extractions concurrently, then diff the results."""
from __future__ import annotations

import asyncio
import functools
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

from . import config
from .diff import DifferenceRecord, diff_pages
from .errors import ComparisonError, DecodeError
from .extraction import PdfBackend, extract_text_async, read_document
from .presets import DiffParams
from .progress import DOCUMENT_KEYS, ProgressCallback, ProgressEvent

logger = logging.getLogger(__name__)

DocumentProgressCallback = Callable[[str, ProgressEvent], None]

STATUS_READY = "Differences ready"
STATUS_NO_DIFFERENCES = "No new text detected"


@dataclass(frozen=True)
class ComparisonResult:
    records: Tuple[DifferenceRecord, ...]
    params: DiffParams
    page_counts: Tuple[int, int]
    elapsed: float

    @property
    def status(self) -> str:
        return STATUS_READY if self.records else STATUS_NO_DIFFERENCES

    def to_dict(self) -> Dict[str, object]:
        return {
            "status": self.status,
            "params": self.params.to_dict(),
            "pages": {"latest": self.page_counts[0], "outdated": self.page_counts[1]},
            "elapsed": self.elapsed,
            "records": [record.to_dict() for record in self.records],
        }


def _bind(on_progress: Optional[DocumentProgressCallback], key: str) -> Optional[ProgressCallback]:
    if on_progress is None:
        return None
    return functools.partial(on_progress, key)


async def compare_documents(
    latest: bytes,
    outdated: bytes,
    *,
    params: Optional[DiffParams] = None,
    on_progress: Optional[DocumentProgressCallback] = None,
    backend: Optional[PdfBackend] = None,
) -> ComparisonResult:
    """Extract ``latest`` and ``outdated`` side by side and report new lines.

    If either extraction fails nothing is diffed: a :class:`ComparisonError`
    naming the failed document(s) is raised instead.
    """

    params = params or DiffParams()
    started = time.perf_counter()
    outcomes = await asyncio.gather(
        extract_text_async(latest, _bind(on_progress, "latest"), backend),
        extract_text_async(outdated, _bind(on_progress, "outdated"), backend),
        return_exceptions=True,
    )

    errors = [
        (key, outcome)
        for key, outcome in zip(DOCUMENT_KEYS, outcomes)
        if isinstance(outcome, BaseException)
    ]
    for _, error in errors:
        if not isinstance(error, DecodeError):
            raise error
    if errors:
        failed = [key for key, _ in errors]
        first = errors[0][1]
        logger.error("Comparison aborted, extraction failed for: %s", ", ".join(failed), exc_info=first)
        raise ComparisonError(failed) from first

    latest_pages: List[str] = outcomes[0]
    outdated_pages: List[str] = outcomes[1]
    records = diff_pages(latest_pages, outdated_pages, params)
    elapsed = time.perf_counter() - started
    logger.info(
        "Compared %d latest / %d outdated page(s): %d page(s) with new text",
        len(latest_pages),
        len(outdated_pages),
        len(records),
    )
    return ComparisonResult(
        records=tuple(records),
        params=params,
        page_counts=(len(latest_pages), len(outdated_pages)),
        elapsed=elapsed,
    )


def compare_files(
    latest_path: str | Path,
    outdated_path: str | Path,
    *,
    params: Optional[DiffParams] = None,
    on_progress: Optional[DocumentProgressCallback] = None,
    backend: Optional[PdfBackend] = None,
    chunk_size: int = config.CHUNK_SIZE,
) -> ComparisonResult:
    """Read two local PDFs and compare them."""

    latest = read_document(latest_path, _bind(on_progress, "latest"), chunk_size)
    outdated = read_document(outdated_path, _bind(on_progress, "outdated"), chunk_size)
    return asyncio.run(
        compare_documents(
            latest,
            outdated,
            params=params,
            on_progress=on_progress,
            backend=backend,
        )
    )
