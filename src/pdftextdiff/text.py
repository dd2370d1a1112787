"""Whitespace normalization shared by extraction and diffing."""
from __future__ import annotations

import re
from typing import List

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_text(value: str) -> str:
    """Collapse whitespace runs to single spaces and trim the ends."""
    return _WHITESPACE_RE.sub(" ", value).strip()


def split_lines(value: str) -> List[str]:
    """Split a page text block into normalized, non-empty lines."""
    lines = (normalize_text(line) for line in value.split("\n"))
    return [line for line in lines if line]


def dedupe_key(line: str) -> str:
    return normalize_text(line).lower()
