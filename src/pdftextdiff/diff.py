"""Line level difference between two extracted documents.

Each page of the latest document is paired with the page at the same index of
the outdated document.  Latest lines are deduplicated, then greedily matched
one-to-one against outdated lines by normalized Levenshtein similarity.  Lines
without a match above the threshold are reported as new.
"""
from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from fractions import Fraction
from typing import Dict, List, Optional, Sequence

import numpy as np
from rapidfuzz import process
from rapidfuzz.distance import Levenshtein

from .presets import DiffParams
from .text import dedupe_key, split_lines

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DifferenceRecord:
    """Summary of the lines unique to the latest document on one page."""

    page: int
    example: str
    total: int

    def to_dict(self) -> Dict[str, object]:
        return {"page": self.page, "example": self.example, "total": self.total}


def levenshtein_distance(a: str, b: str) -> int:
    """Unit cost insert/delete/substitute distance over code points."""
    return Levenshtein.distance(a, b)


def similarity(a: str, b: str) -> float:
    longest = max(len(a), len(b), 1)
    return 1 - levenshtein_distance(a, b) / longest


def _threshold_ratio(threshold: float) -> Fraction:
    # 0.94 -> 47/50, so scores sitting exactly on the threshold compare exactly
    return Fraction(threshold).limit_denominator(10**6)


def _dedupe(lines: Sequence[str]) -> List[str]:
    seen = set()
    kept: List[str] = []
    for line in lines:
        key = dedupe_key(line)
        if key in seen:
            continue
        seen.add(key)
        kept.append(line)
    return kept


def _exceeds_caps(latest: Sequence[str], outdated: Sequence[str], params: DiffParams) -> bool:
    if len(latest) > params.max_lines_per_page or len(outdated) > params.max_lines_per_page:
        return True
    longest = max((len(line) for line in (*latest, *outdated)), default=0)
    return longest > params.max_line_length


def _exact_unique(latest: Sequence[str], outdated: Sequence[str]) -> List[str]:
    available = Counter(outdated)
    unique: List[str] = []
    for line in latest:
        if available[line] > 0:
            available[line] -= 1
        else:
            unique.append(line)
    return unique


def _fuzzy_unique(latest: Sequence[str], outdated: Sequence[str], threshold: float) -> List[str]:
    distances = process.cdist(latest, outdated, scorer=Levenshtein.distance, dtype=np.int64)
    latest_len = np.array([len(line) for line in latest], dtype=np.int64)
    outdated_len = np.array([len(line) for line in outdated], dtype=np.int64)
    longest = np.maximum(np.maximum.outer(latest_len, outdated_len), 1)

    scores = 1.0 - distances / longest
    ratio = _threshold_ratio(threshold)
    accepted = (longest - distances) * ratio.denominator >= ratio.numerator * longest

    consumed = np.zeros(len(outdated), dtype=bool)
    unique: List[str] = []
    for row, line in enumerate(latest):
        if consumed.all():
            unique.append(line)
            continue
        candidates = np.where(consumed, -1.0, scores[row])
        best = int(np.argmax(candidates))
        if accepted[row, best]:
            consumed[best] = True
        else:
            unique.append(line)
    return unique


def _classify_page(
    latest_text: str,
    outdated_text: str,
    params: DiffParams,
    page: Optional[int] = None,
) -> List[str]:
    latest = _dedupe(split_lines(latest_text))
    outdated = split_lines(outdated_text)
    if not latest:
        return []
    if not outdated:
        return latest
    if _exceeds_caps(latest, outdated, params):
        logger.warning(
            "Page %s exceeds matching caps (%d latest, %d outdated lines); "
            "comparing by exact match only",
            page if page is not None else "?",
            len(latest),
            len(outdated),
        )
        return _exact_unique(latest, outdated)
    return _fuzzy_unique(latest, outdated, params.similarity_threshold)


def page_unique_lines(
    latest_text: str,
    outdated_text: str,
    params: Optional[DiffParams] = None,
) -> List[str]:
    """Return the lines of one latest page with no counterpart in the outdated page."""

    return _classify_page(latest_text, outdated_text or "", params or DiffParams())


def diff_pages(
    latest_pages: Sequence[str],
    outdated_pages: Sequence[str],
    params: Optional[DiffParams] = None,
) -> List[DifferenceRecord]:
    """Compare two documents page by page.

    Pages missing from ``outdated_pages`` are treated as empty, so every line
    of the matching latest page is reported.  Pages without new lines are
    omitted from the result.
    """

    params = params or DiffParams()
    records: List[DifferenceRecord] = []
    for index, latest_text in enumerate(latest_pages):
        outdated_text = outdated_pages[index] if index < len(outdated_pages) else ""
        unique = _classify_page(latest_text or "", outdated_text or "", params, page=index + 1)
        logger.debug("Page %d: %d new line(s)", index + 1, len(unique))
        if unique:
            records.append(DifferenceRecord(page=index + 1, example=unique[0], total=len(unique)))
    return records
