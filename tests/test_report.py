import json
from datetime import datetime, timezone

from pdftextdiff.diff import DifferenceRecord
from pdftextdiff.report import (
    REPORT_FILENAME,
    REPORT_MIME_TYPE,
    build_text_report,
    diff_result_to_json,
    format_record,
    write_json_report,
    write_text_report,
)

GENERATED = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def test_format_record_pluralizes():
    assert format_record(DifferenceRecord(1, "Grass is green.", 1)) == (
        "Page 1: 1 new sentence. Example: Grass is green."
    )
    assert format_record(DifferenceRecord(4, "New.", 3)) == "Page 4: 3 new sentences. Example: New."


def test_build_text_report_layout():
    records = [DifferenceRecord(1, "Grass is green.", 1), DifferenceRecord(3, "Added.", 2)]
    assert build_text_report(records, GENERATED) == (
        "PDF Diff Export\n"
        "Generated: 2024-01-02T03:04:05.000Z\n"
        "\n"
        "Items unique to the latest PDF:\n"
        "\n"
        "Page 1: 1 new sentence. Example: Grass is green.\n"
        "\n"
        "Page 3: 2 new sentences. Example: Added.\n"
    )


def test_build_text_report_without_records():
    report = build_text_report([], GENERATED)
    assert report.endswith("Items unique to the latest PDF:\n\nNo new text detected in the latest PDF.\n")


def test_write_text_report_defaults(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    path = write_text_report([DifferenceRecord(2, "Café ünïcode.", 1)], generated_at=GENERATED)
    assert path.name == REPORT_FILENAME == "pdf-text-diff.txt"
    assert "Example: Café ünïcode." in path.read_text(encoding="utf-8")
    assert REPORT_MIME_TYPE == "text/plain; charset=utf-8"


def test_json_reports(tmp_path):
    records = [DifferenceRecord(1, "Grass is green.", 1)]
    expected = [{"page": 1, "example": "Grass is green.", "total": 1}]
    assert json.loads(diff_result_to_json(records)) == expected

    path = tmp_path / "nested" / "diff.json"
    write_json_report(records, path)
    assert json.loads(path.read_text(encoding="utf-8")) == expected


def test_json_report_file_matches_string_form(tmp_path):
    records = [DifferenceRecord(5, "Ünïcode stays readable.", 2)]
    path = tmp_path / "diff.json"
    write_json_report(records, path)
    assert path.read_text(encoding="utf-8") == diff_result_to_json(records)
