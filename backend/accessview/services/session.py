from __future__ import annotations

import itertools
from dataclasses import dataclass
from typing import Optional, Tuple

import structlog

from accessview.ingest.collector import parse_payload
from accessview.normalization.access_map import AccessMapRow, flatten_access_map, normalize_access_map
from accessview.normalization.findings import Finding, normalize_finding
from accessview.services import reporting
from accessview.services.access_tree import AccessTree, build_access_tree
from accessview.services.query import FindingsView, QueryEngine, SortField

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class LoadResult:
    has_data: bool
    superseded: bool = False
    findings: int = 0
    access_map_rows: int = 0


class ReportSession:
    """
    Holds the loaded report and everything derived from it.

    A load only replaces state once decoding and normalization have finished, and
    a load started before a newer one is discarded when it completes.
    """

    def __init__(self, page_size: int = 10, sort_field: SortField | str = SortField.RULE):
        self.raw_report: Optional[bytes] = None
        self.findings: Tuple[Finding, ...] = ()
        self.access_map: Tuple[AccessMapRow, ...] = ()
        self.tree_search = ""
        self.engine = QueryEngine(page_size=page_size, sort_field=sort_field)
        self._tokens = itertools.count(1)
        self._latest_token = 0

    @property
    def loaded(self) -> bool:
        return self.raw_report is not None

    def begin_load(self) -> int:
        self._latest_token = next(self._tokens)
        return self._latest_token

    def complete_load(self, token: int, payload: bytes | str) -> LoadResult:
        if token != self._latest_token:
            logger.info("session.load_superseded", token=token, latest=self._latest_token)
            return LoadResult(has_data=False, superseded=True)

        raw = payload.encode("utf-8") if isinstance(payload, str) else bytes(payload)
        data = parse_payload(raw.decode("utf-8-sig", errors="replace"))
        if not data.roots:
            logger.info("report.no_data", size=len(raw))
            return LoadResult(has_data=False)

        findings = tuple(normalize_finding(record) for record in data.findings)
        rows = tuple(flatten_access_map(normalize_access_map(data.access_map)))

        self.raw_report = raw
        self.findings = findings
        self.access_map = rows
        self.tree_search = ""
        self.engine.reset(findings)
        logger.info("report.loaded", roots=data.roots, findings=len(findings), access_map_rows=len(rows))
        return LoadResult(has_data=True, findings=len(findings), access_map_rows=len(rows))

    def load(self, payload: bytes | str) -> LoadResult:
        return self.complete_load(self.begin_load(), payload)

    def reset(self) -> None:
        self.raw_report = None
        self.findings = ()
        self.access_map = ()
        self.tree_search = ""
        self.engine.reset(())
        logger.info("session.reset")

    # Views ---------------------------------------------------------------
    def view(self) -> FindingsView:
        return self.engine.view()

    def set_tree_search(self, search: str) -> None:
        self.tree_search = (search or "").strip().lower()

    def access_tree(self, search: Optional[str] = None) -> AccessTree:
        if search is not None:
            self.set_tree_search(search)
        return build_access_tree(self.access_map, self.tree_search)

    def stats(self) -> reporting.ReportStats:
        return reporting.build_stats(self.findings, self.access_map)

    # Exports -------------------------------------------------------------
    def export_json(self) -> Optional[bytes]:
        if self.raw_report is None:
            return None
        return reporting.export_json_bytes(self.raw_report)

    def export_csv(self) -> Optional[str]:
        return reporting.export_csv(self.engine.filtered())

    def access_map_json(self) -> Optional[str]:
        if not self.access_map:
            return None
        return reporting.access_map_json(self.access_map)
