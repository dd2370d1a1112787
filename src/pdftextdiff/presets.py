"""Comparison parameter presets."""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Iterable, Mapping


@dataclass(frozen=True)
class DiffParams:
    """Parameters driving line matching between two documents.

    ``similarity_threshold`` is the minimum normalized Levenshtein similarity
    for a latest line to be paired with an outdated line.  Pages whose line
    count or longest line exceed the caps are compared by exact match only.
    """

    similarity_threshold: float = 0.94
    max_lines_per_page: int = 2000
    max_line_length: int = 2000

    def __post_init__(self) -> None:
        if not 0.0 <= self.similarity_threshold <= 1.0:
            raise ValueError("similarity_threshold must be between 0 and 1")
        if self.max_lines_per_page < 1 or self.max_line_length < 1:
            raise ValueError("line caps must be positive")

    def to_dict(self) -> Dict[str, float]:
        return {
            "similarity_threshold": self.similarity_threshold,
            "max_lines_per_page": self.max_lines_per_page,
            "max_line_length": self.max_line_length,
        }

    def copy(self, **overrides: float) -> "DiffParams":
        return replace(self, **overrides)


@dataclass(frozen=True)
class Preset:
    """Named bundle of parameters."""

    name: str
    description: str
    params: DiffParams

    def to_dict(self) -> Dict[str, object]:
        return {
            "name": self.name,
            "description": self.description,
            "params": self.params.to_dict(),
        }


PRESETS: Mapping[str, Preset] = {
    "strict": Preset(
        name="strict",
        description="Only near-verbatim lines count as unchanged.",
        params=DiffParams(similarity_threshold=0.98),
    ),
    "balanced": Preset(
        name="balanced",
        description="Tolerates typo fixes and reflow spacing; default.",
        params=DiffParams(similarity_threshold=0.94),
    ),
    "loose": Preset(
        name="loose",
        description="Treats light rewording as unchanged.",
        params=DiffParams(similarity_threshold=0.9),
    ),
}

DEFAULT_PRESET = "balanced"


def get_preset(name: str) -> Preset:
    key = name.lower()
    if key not in PRESETS:
        raise KeyError(f"Unknown preset '{name}'. Available: {', '.join(sorted(PRESETS))}")
    return PRESETS[key]


def iter_presets() -> Iterable[Preset]:
    return PRESETS.values()
