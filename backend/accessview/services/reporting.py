from __future__ import annotations

import csv
import io
import json
from dataclasses import asdict, dataclass
from typing import Optional, Sequence

from accessview.normalization.access_map import AccessMapRow
from accessview.normalization.findings import Finding

JSON_EXPORT_FILENAME = "access-map-report.json"
CSV_EXPORT_FILENAME = "access-map-findings.csv"

CSV_HEADER = [
    "rule_id",
    "rule_name",
    "finding_type",
    "severity",
    "message",
    "path",
    "line",
    "validation_status",
    "validation_confidence",
]


@dataclass(frozen=True)
class ReportStats:
    findings: int
    critical: int
    high: int
    medium: int
    validated: int
    access_map_rows: int


def build_stats(findings: Sequence[Finding], rows: Sequence[AccessMapRow]) -> ReportStats:
    severities = [finding.severity.lower() for finding in findings]
    return ReportStats(
        findings=len(findings),
        critical=severities.count("critical"),
        high=severities.count("high"),
        medium=severities.count("medium"),
        validated=sum(1 for finding in findings if finding.validation_status),
        access_map_rows=len(rows),
    )


def export_json_bytes(raw_report: bytes) -> bytes:
    return bytes(raw_report)


def export_csv(findings: Sequence[Finding]) -> Optional[str]:
    """Render findings as CSV, or ``None`` when there is nothing to export."""

    if not findings:
        return None

    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=CSV_HEADER, lineterminator="\n")
    writer.writeheader()
    for finding in findings:
        writer.writerow({column: getattr(finding, column) for column in CSV_HEADER})
    return buffer.getvalue()


def access_map_json(rows: Sequence[AccessMapRow]) -> str:
    return json.dumps([asdict(row) for row in rows], indent=2)
