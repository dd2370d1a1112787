from pathlib import Path
import sys

import pytest

# Ensure src directory is on the path
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from pdftextdiff.errors import DecodeError
from pdftextdiff.extraction import TextRun
from pdftextdiff.progress import ProgressEvent


class FakeDocument:
    def __init__(self, pages):
        self._pages = pages
        self.page_count = len(pages)
        self.closed = False

    def iter_page_runs(self, index):
        return iter(self._pages[index])

    def close(self):
        self.closed = True


class FakeBackend:
    """In-memory decode engine keyed by the document bytes."""

    def __init__(self, documents):
        self.documents = documents
        self.opened = []

    def open(self, data, on_progress=None):
        if data not in self.documents:
            raise DecodeError(f"unknown document {data!r}")
        if on_progress is not None:
            on_progress(ProgressEvent("loading", len(data), len(data)))
        document = FakeDocument(self.documents[data])
        self.opened.append(document)
        return document


def runs_for(text):
    """One run per word, the last word of each line carrying the EOL hint."""
    runs = []
    for line in text.split("\n"):
        words = line.split(" ")
        for seq, word in enumerate(words):
            runs.append(TextRun(word, has_eol=seq == len(words) - 1))
    return runs


@pytest.fixture
def fake_backend():
    return FakeBackend(
        {
            b"latest": [runs_for("The sky is blue.\nGrass is green."), runs_for("Page two.")],
            b"outdated": [runs_for("The sky is blue.")],
        }
    )
