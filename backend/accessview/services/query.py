from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field, replace
from typing import List, Sequence

import structlog

from accessview.normalization.findings import Finding

logger = structlog.get_logger(__name__)


class ValidationFilter(str, enum.Enum):
    ALL = "all"
    ACTIVE = "active"
    INACTIVE = "inactive"
    NOT_ATTEMPTED = "not_attempted"


VALIDATION_STATUSES = {
    ValidationFilter.ACTIVE: "active credential",
    ValidationFilter.INACTIVE: "inactive credential",
    ValidationFilter.NOT_ATTEMPTED: "not attempted",
}


class SortField(str, enum.Enum):
    RULE = "rule"
    LOCATION = "location"
    SEVERITY = "severity"
    VALIDATION = "validation"
    CONFIDENCE = "confidence"
    LINE = "line"


SORT_ATTRIBUTES = {
    SortField.RULE: "rule_id",
    SortField.LOCATION: "path",
    SortField.SEVERITY: "severity",
    SortField.VALIDATION: "validation_status",
    SortField.CONFIDENCE: "confidence",
    SortField.LINE: "line",
}


class SortDirection(str, enum.Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass
class QueryState:
    text_filter: str = ""
    validation_filter: ValidationFilter = ValidationFilter.ALL
    sort_field: SortField = SortField.RULE
    sort_direction: SortDirection = SortDirection.ASC
    page_size: int = 10
    current_page: int = 1


@dataclass(frozen=True)
class FindingsView:
    rows: List[Finding]
    total_pages: int
    current_page: int
    page_size: int
    filtered_count: int
    total_count: int
    text_filter: str
    validation_filter: ValidationFilter
    sort_field: SortField
    sort_direction: SortDirection


def sort_key(finding: Finding, sort_field: SortField | str) -> str:
    try:
        attribute = SORT_ATTRIBUTES[SortField(sort_field)]
    except ValueError:
        attribute = "path"
    return getattr(finding, attribute).lower()


def _haystack(finding: Finding) -> str:
    return " ".join(
        [
            finding.rule_id,
            finding.rule_name,
            finding.finding_type,
            finding.message,
            finding.path,
            finding.validation_status,
            finding.fingerprint,
        ]
    ).lower()


def filter_findings(
    findings: Sequence[Finding], text_filter: str, validation_filter: ValidationFilter
) -> List[Finding]:
    wanted = VALIDATION_STATUSES.get(ValidationFilter(validation_filter))
    matches = []
    for finding in findings:
        if wanted is not None and finding.validation_status.lower() != wanted:
            continue
        if text_filter and text_filter not in _haystack(finding):
            continue
        matches.append(finding)
    return matches


def sort_findings(
    findings: Sequence[Finding], sort_field: SortField, direction: SortDirection
) -> List[Finding]:
    # sorted() stays stable with reverse=True, so ties keep their prior order both ways.
    return sorted(
        findings,
        key=lambda finding: sort_key(finding, sort_field),
        reverse=SortDirection(direction) is SortDirection.DESC,
    )


def total_pages_for(count: int, page_size: int) -> int:
    return max(1, math.ceil(count / page_size))


def paginate(rows: Sequence[Finding], page: int, page_size: int) -> tuple[List[Finding], int, int]:
    total_pages = total_pages_for(len(rows), page_size)
    page = min(max(page, 1), total_pages)
    start = (page - 1) * page_size
    return list(rows[start : start + page_size]), page, total_pages


class QueryEngine:
    """
    Owns the findings table query state.

    Every transition is synchronous and followed by a full re-evaluation through
    :meth:`view`; nothing is cached between calls.
    """

    def __init__(
        self,
        findings: Sequence[Finding] = (),
        page_size: int = 10,
        sort_field: SortField | str = SortField.RULE,
    ):
        if page_size < 1:
            raise ValueError("page_size must be a positive integer")
        self._defaults = QueryState(page_size=page_size, sort_field=SortField(sort_field))
        self.findings: tuple[Finding, ...] = tuple(findings)
        self.state = replace(self._defaults)

    def reset(self, findings: Sequence[Finding] | None = None) -> None:
        if findings is not None:
            self.findings = tuple(findings)
        self.state = replace(self._defaults)

    # Transitions ---------------------------------------------------------
    def set_text_filter(self, text: str) -> None:
        self.state.text_filter = (text or "").strip().lower()
        self.state.current_page = 1

    def set_validation_filter(self, value: ValidationFilter | str) -> None:
        self.state.validation_filter = ValidationFilter(value)
        self.state.current_page = 1

    def set_page_size(self, size: int) -> None:
        if size < 1:
            raise ValueError("page_size must be a positive integer")
        self.state.page_size = size
        self.state.current_page = 1

    def set_sort(self, sort_field: SortField | str) -> None:
        sort_field = SortField(sort_field)
        if sort_field is self.state.sort_field:
            self.state.sort_direction = (
                SortDirection.DESC
                if self.state.sort_direction is SortDirection.ASC
                else SortDirection.ASC
            )
        else:
            self.state.sort_field = sort_field
            self.state.sort_direction = SortDirection.ASC
        logger.debug(
            "query.sort_changed",
            sort_field=self.state.sort_field.value,
            sort_direction=self.state.sort_direction.value,
        )

    def set_page(self, page: int) -> None:
        total = total_pages_for(len(self.filtered()), self.state.page_size)
        self.state.current_page = min(max(page, 1), total)

    def previous_page(self) -> None:
        if self.state.current_page > 1:
            self.state.current_page -= 1

    def next_page(self) -> None:
        total = total_pages_for(len(self.filtered()), self.state.page_size)
        if self.state.current_page < total:
            self.state.current_page += 1

    # Evaluation ----------------------------------------------------------
    def filtered(self) -> List[Finding]:
        """All matching findings in display order, ignoring pagination."""

        matches = filter_findings(
            self.findings, self.state.text_filter, self.state.validation_filter
        )
        return sort_findings(matches, self.state.sort_field, self.state.sort_direction)

    def view(self) -> FindingsView:
        rows = self.filtered()
        page_rows, page, total_pages = paginate(rows, self.state.current_page, self.state.page_size)
        self.state.current_page = page
        return FindingsView(
            rows=page_rows,
            total_pages=total_pages,
            current_page=page,
            page_size=self.state.page_size,
            filtered_count=len(rows),
            total_count=len(self.findings),
            text_filter=self.state.text_filter,
            validation_filter=self.state.validation_filter,
            sort_field=self.state.sort_field,
            sort_direction=self.state.sort_direction,
        )
