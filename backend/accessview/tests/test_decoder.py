import json

from accessview.ingest.decoder import decode_payload


def test_single_document_yields_one_root():
    roots = decode_payload(json.dumps({"findings": [], "access_map": []}))
    assert roots == [{"findings": [], "access_map": []}]


def test_json_lines_skip_invalid_lines():
    lines = [
        json.dumps({"rule": {"id": "R1"}, "finding": {"path": "a"}}),
        "{not json",
        "",
        json.dumps({"rule": {"id": "R2"}, "finding": {"path": "b"}}),
        "[1, 2",
        json.dumps([1, 2, 3]),
    ]
    roots = decode_payload("\n".join(lines))

    # five non-empty lines, two of them malformed
    assert len(roots) == 3
    assert roots[0]["rule"]["id"] == "R1"
    assert roots[2] == [1, 2, 3]


def test_crlf_line_endings():
    text = '{"a": 1}\r\n{"b": 2}\r\n'
    assert decode_payload(text) == [{"a": 1}, {"b": 2}]


def test_nothing_decodable_yields_empty_sequence():
    assert decode_payload("garbage\nmore garbage\n{") == []


def test_whitespace_only_lines_are_skipped():
    assert decode_payload('{"a": 1}\n   \n{"b": 2}') == [{"a": 1}, {"b": 2}]


def test_deeply_nested_document_is_no_data():
    text = '{"findings": [], "x": ' + "[" * 3000 + "]" * 3000 + "}"
    assert decode_payload(text) == []


def test_deeply_nested_line_is_skipped():
    deep = "[" * 3000 + "]" * 3000
    text = "\n".join([deep, '{"findings": []}'])
    assert decode_payload(text) == [{"findings": []}]
