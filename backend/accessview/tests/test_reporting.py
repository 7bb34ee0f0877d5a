import csv
import io
import json

from accessview.normalization.access_map import AccessMapRow
from accessview.normalization.findings import Finding
from accessview.services import reporting


def test_csv_has_header_and_one_row_per_finding():
    findings = [
        Finding(rule_id="R1", rule_name="AWS", severity="High", message='key "quoted", here', path="a.env", line="3"),
        Finding(rule_id="R2", rule_name="GCP", severity="Low", message="plain", path="b.env"),
    ]

    text = reporting.export_csv(findings)

    lines = text.splitlines()
    assert len(lines) == 3
    assert lines[0] == ",".join(reporting.CSV_HEADER)
    assert '"key ""quoted"", here"' in lines[1]

    parsed = list(csv.reader(io.StringIO(text)))
    assert all(len(row) == 9 for row in parsed)
    assert parsed[1][4] == 'key "quoted", here'


def test_csv_export_of_nothing_is_none():
    assert reporting.export_csv([]) is None


def test_json_export_is_verbatim():
    raw = b'{"findings": [] }\n\n  '
    assert reporting.export_json_bytes(raw) == raw


def test_access_map_json_is_pretty_printed():
    rows = [AccessMapRow(provider="aws", account="1", fingerprint="", resource="bucket/x", permissions=("read",))]
    text = reporting.access_map_json(rows)
    assert text.startswith('[\n  {\n    "provider": "aws"')
    assert json.loads(text) == [
        {"provider": "aws", "account": "1", "fingerprint": "", "resource": "bucket/x", "permissions": ["read"]}
    ]


def test_stats_count_severities_case_insensitively():
    findings = [
        Finding(severity="CRITICAL", validation_status="active credential"),
        Finding(severity="high"),
        Finding(severity="High", validation_status="not attempted"),
        Finding(severity="Medium"),
        Finding(severity="info"),
    ]
    stats = reporting.build_stats(findings, [])
    assert (stats.findings, stats.critical, stats.high, stats.medium) == (5, 1, 2, 1)
    assert stats.validated == 2
    assert stats.access_map_rows == 0
