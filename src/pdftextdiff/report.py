"""Plain text and JSON report helpers."""
from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Sequence

from .diff import DifferenceRecord

REPORT_FILENAME = "pdf-text-diff.txt"
REPORT_MIME_TYPE = "text/plain; charset=utf-8"

REPORT_HEADER = "PDF Diff Export"
REPORT_LEAD_IN = "Items unique to the latest PDF:"
NO_DIFFERENCES = "No new text detected in the latest PDF."


def format_record(record: DifferenceRecord) -> str:
    noun = "sentence" if record.total == 1 else "sentences"
    return f"Page {record.page}: {record.total} new {noun}. Example: {record.example}"


def _timestamp(generated_at: Optional[datetime]) -> str:
    moment = generated_at or datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_text_report(
    records: Sequence[DifferenceRecord],
    generated_at: Optional[datetime] = None,
) -> str:
    if records:
        contents = "\n\n".join(format_record(record) for record in records)
    else:
        contents = NO_DIFFERENCES
    return (
        f"{REPORT_HEADER}\nGenerated: {_timestamp(generated_at)}\n\n"
        f"{REPORT_LEAD_IN}\n\n{contents}\n"
    )


def write_text_report(
    records: Sequence[DifferenceRecord],
    path: str | Path = REPORT_FILENAME,
    generated_at: Optional[datetime] = None,
) -> Path:
    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(build_text_report(records, generated_at), encoding="utf-8")
    return out_path


def diff_result_to_json(records: Sequence[DifferenceRecord]) -> str:
    return json.dumps([record.to_dict() for record in records], ensure_ascii=False, indent=2)


def write_json_report(records: Sequence[DifferenceRecord], path: str | Path) -> None:
    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(diff_result_to_json(records), encoding="utf-8")
