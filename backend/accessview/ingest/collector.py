from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, List

from accessview.ingest.decoder import decode_payload
from accessview.normalization.values import is_present


@dataclass
class RawReportData:
    findings: List[Any] = field(default_factory=list)
    access_map: List[Any] = field(default_factory=list)
    roots: int = 0

    def extend(self, other: "RawReportData") -> None:
        self.findings.extend(other.findings)
        self.access_map.extend(other.access_map)
        self.roots += other.roots


def collect_report_data(root: Any) -> RawReportData:
    """
    Harvest finding records and access-map entries from a value of unknown shape.

    Every nested value is visited in document order, whatever its key. A mapping
    holding both ``rule`` and ``finding`` is a finding; ``findings`` and
    ``access_map`` lists are harvested wholesale. A record is taken at most once
    even when it is reachable both as a list element and as a visited node.
    """

    data = RawReportData(roots=1)
    seen_findings: set[int] = set()
    seen_entries: set[int] = set()

    def add_finding(record: Any) -> None:
        if isinstance(record, (dict, list)):
            if id(record) in seen_findings:
                return
            seen_findings.add(id(record))
        data.findings.append(record)

    def add_entry(record: Any) -> None:
        if isinstance(record, (dict, list)):
            if id(record) in seen_entries:
                return
            seen_entries.add(id(record))
        data.access_map.append(record)

    stack: List[Any] = [root]
    while stack:
        node = stack.pop()
        if isinstance(node, list):
            stack.extend(reversed(node))
            continue
        if not isinstance(node, dict):
            continue

        if is_present(node.get("rule")) and is_present(node.get("finding")):
            add_finding(node)
        if isinstance(node.get("findings"), list):
            for record in node["findings"]:
                add_finding(record)
        if isinstance(node.get("access_map"), list):
            for record in node["access_map"]:
                add_entry(record)

        stack.extend(reversed(list(node.values())))

    if not data.findings and isinstance(root, list):
        data.findings.extend(root)

    return data


def collect_from_roots(roots: Iterable[Any]) -> RawReportData:
    data = RawReportData()
    for root in roots:
        data.extend(collect_report_data(root))
    return data


def parse_payload(text: str) -> RawReportData:
    return collect_from_roots(decode_payload(text))
