import csv
import io
import json

from accessview.services.query import SortField
from accessview.services.session import ReportSession

SAMPLE = json.dumps(
    {
        "findings": [{"rule": {"id": "R1"}, "finding": {"severity": "Critical", "path": "a.env"}}],
        "access_map": [{"provider": "aws", "account": "1", "resource": "bucket/x", "permission": "read,write"}],
    }
)


def test_end_to_end_single_document():
    session = ReportSession()
    result = session.load(SAMPLE)

    assert result.has_data
    assert (result.findings, result.access_map_rows) == (1, 1)
    (finding,) = session.findings
    assert (finding.rule_id, finding.severity, finding.path) == ("R1", "Critical", "a.env")
    (row,) = session.access_map
    assert row.resource == "bucket/x"
    assert list(row.permissions) == ["read", "write"]


def test_raw_report_is_kept_byte_for_byte():
    payload = ("\ufeff" + SAMPLE + "\n").encode("utf-8")
    session = ReportSession()
    assert session.load(payload).has_data
    assert session.export_json() == payload


def test_jsonl_report_loads_good_lines():
    lines = [
        json.dumps({"rule": {"id": "R1", "name": "one"}, "finding": {"path": "x"}}),
        "oops",
        json.dumps({"rule": {"id": "R2", "name": "two"}, "finding": {"path": "y"}}),
    ]
    session = ReportSession()
    assert session.load("\n".join(lines)).findings == 2


def test_undecodable_report_keeps_previous_state():
    session = ReportSession()
    session.load(SAMPLE)
    result = session.load("not json at all")

    assert not result.has_data
    assert len(session.findings) == 1
    assert session.loaded


def test_new_report_resets_query_state():
    session = ReportSession(page_size=5)
    session.load(SAMPLE)
    session.engine.set_text_filter("zzz")
    session.engine.set_sort(SortField.LINE)
    session.set_tree_search("aws")

    session.load(SAMPLE)

    assert session.engine.state.text_filter == ""
    assert session.engine.state.sort_field is SortField.RULE
    assert session.engine.state.page_size == 5
    assert session.tree_search == ""


def test_stale_load_is_discarded():
    session = ReportSession()
    stale = session.begin_load()
    fresh = session.begin_load()

    assert session.complete_load(stale, SAMPLE).superseded
    assert not session.loaded
    assert session.complete_load(fresh, SAMPLE).has_data


def test_csv_export_follows_filters_not_pagination():
    findings = [
        {"rule": {"id": f"R{i}"}, "finding": {"path": f"f{i}.env", "validation": {"status": status}}}
        for i, status in enumerate(["Active Credential", "inactive credential", "active credential"])
    ]
    session = ReportSession(page_size=1)
    session.load(json.dumps({"findings": findings}))
    session.engine.set_validation_filter("active")

    rows = list(csv.reader(io.StringIO(session.export_csv())))

    assert len(rows) == 3
    assert [row[0] for row in rows[1:]] == ["R0", "R2"]
    assert all(len(row) == 9 for row in rows)


def test_reset_clears_everything():
    session = ReportSession()
    session.load(SAMPLE)
    session.reset()

    assert not session.loaded
    assert session.findings == ()
    assert session.export_json() is None
    assert session.access_map_json() is None
    assert session.access_tree().empty
