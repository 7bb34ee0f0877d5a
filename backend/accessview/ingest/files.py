from __future__ import annotations

from pathlib import Path
from typing import Iterable

from accessview.errors import ReportFileError


def read_report_file(path: str | Path, allowed_extensions: Iterable[str] = ("json", "jsonl")) -> bytes:
    report_path = Path(path).expanduser()
    extension = report_path.suffix.lstrip(".").lower()
    allowed = {ext.lower() for ext in allowed_extensions}
    if extension not in allowed:
        raise ReportFileError(
            f"Report must be a JSON or JSONL file (got extension: {extension or 'none'})"
        )

    try:
        return report_path.read_bytes()
    except OSError as exc:
        raise ReportFileError(f"Failed to read report at {report_path}: {exc}") from exc
