import asyncio

import pytest

from pdftextdiff.compare import compare_documents, compare_files
from pdftextdiff.diff import DifferenceRecord
from pdftextdiff.errors import ComparisonError, DecodeError, EngineUnavailable
from pdftextdiff.presets import DiffParams


def test_compare_documents_reports_new_text(fake_backend):
    result = asyncio.run(compare_documents(b"latest", b"outdated", backend=fake_backend))
    assert result.records == (
        DifferenceRecord(page=1, example="Grass is green.", total=1),
        DifferenceRecord(page=2, example="Page two.", total=1),
    )
    assert result.page_counts == (2, 1)
    assert result.status == "Differences ready"
    assert result.params == DiffParams()


def test_compare_documents_without_differences(fake_backend):
    result = asyncio.run(compare_documents(b"outdated", b"latest", backend=fake_backend))
    assert result.records == ()
    assert result.status == "No new text detected"
    assert result.to_dict()["records"] == []


def test_extractions_are_interleaved(fake_backend):
    events = []
    asyncio.run(
        compare_documents(
            b"latest",
            b"outdated",
            backend=fake_backend,
            on_progress=lambda key, event: events.append((key, event.phase)),
        )
    )
    keys = [key for key, _ in events]
    assert keys.count("latest") == 3
    assert keys.count("outdated") == 2
    # the outdated document starts before the latest one has finished
    assert keys.index("outdated") < len(keys) - 1 - keys[::-1].index("latest")


def test_failed_extraction_names_the_document(fake_backend):
    with pytest.raises(ComparisonError) as excinfo:
        asyncio.run(compare_documents(b"broken", b"outdated", backend=fake_backend))
    assert excinfo.value.failed == ("latest",)
    assert isinstance(excinfo.value.__cause__, DecodeError)
    assert "latest" in str(excinfo.value)


def test_both_failures_are_reported(fake_backend):
    with pytest.raises(ComparisonError) as excinfo:
        asyncio.run(compare_documents(b"bad-1", b"bad-2", backend=fake_backend))
    assert excinfo.value.failed == ("latest", "outdated")


def test_engine_failure_is_not_wrapped():
    class BrokenBackend:
        def open(self, data, on_progress=None):
            raise EngineUnavailable("no engine")

    with pytest.raises(EngineUnavailable):
        asyncio.run(compare_documents(b"a", b"b", backend=BrokenBackend()))


def test_compare_files_reads_from_disk(tmp_path, fake_backend):
    latest = tmp_path / "latest.pdf"
    outdated = tmp_path / "outdated.pdf"
    latest.write_bytes(b"latest")
    outdated.write_bytes(b"outdated")
    phases = []
    result = compare_files(
        latest,
        outdated,
        backend=fake_backend,
        on_progress=lambda key, event: phases.append((key, event.phase)),
    )
    assert [r.page for r in result.records] == [1, 2]
    assert phases[0] == ("latest", "loading")
    assert ("outdated", "pages") in phases
