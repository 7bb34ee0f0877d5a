from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from accessview.normalization.values import dig, first_text


@dataclass(frozen=True)
class Finding:
    rule_id: str = ""
    rule_name: str = ""
    finding_type: str = ""
    severity: str = ""
    message: str = ""
    path: str = ""
    line: str = ""
    validation_status: str = ""
    validation_confidence: str = ""
    validation_response: str = ""
    confidence: str = ""
    snippet: str = ""
    fingerprint: str = ""
    raw: Any = field(default=None, repr=False, compare=False)


def _validation_block(record: Any) -> dict:
    # Newer reports nest validation under the finding, older ones keep it at the top level.
    for candidate in (dig(record, "finding", "validation"), dig(record, "validation")):
        if isinstance(candidate, dict):
            return candidate
    return {}


def normalize_finding(record: Any) -> Finding:
    validation = _validation_block(record)
    return Finding(
        rule_id=first_text(record, ("rule", "id")),
        rule_name=first_text(record, ("rule", "name")),
        finding_type=first_text(record, ("finding", "type"), ("finding", "category")),
        severity=first_text(record, ("finding", "severity"), ("severity",)),
        message=first_text(record, ("finding", "message"), ("finding", "snippet")),
        path=first_text(record, ("finding", "path"), ("path",)),
        line=first_text(record, ("finding", "line"), ("finding", "start", "line")),
        validation_status=first_text(validation, ("status",)),
        validation_confidence=first_text(validation, ("confidence",)),
        validation_response=first_text(validation, ("response",)),
        confidence=first_text(record, ("finding", "confidence")),
        snippet=first_text(record, ("finding", "snippet")),
        fingerprint=first_text(record, ("finding", "fingerprint")),
        raw=record,
    )
