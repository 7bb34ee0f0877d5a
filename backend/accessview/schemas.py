from __future__ import annotations

from typing import Any, List, Literal, Optional

from pydantic import BaseModel, Field

from accessview.services.query import SortDirection, SortField, ValidationFilter


class FindingRead(BaseModel):
    rule_id: str
    rule_name: str
    finding_type: str
    severity: str
    message: str
    path: str
    line: str
    validation_status: str
    validation_confidence: str
    validation_response: str
    confidence: str
    snippet: str
    fingerprint: str
    raw: Optional[Any] = None

    class Config:
        from_attributes = True


class FindingsPage(BaseModel):
    rows: List[FindingRead]
    total_pages: int
    current_page: int
    page_size: int
    filtered_count: int
    total_count: int
    text_filter: str
    validation_filter: ValidationFilter
    sort_field: SortField
    sort_direction: SortDirection

    class Config:
        from_attributes = True


class QueryUpdate(BaseModel):
    text: Optional[str] = None
    validation: Optional[ValidationFilter] = None
    page_size: Optional[int] = Field(default=None, ge=1)
    sort: Optional[SortField] = None
    page: Optional[int] = None
    step: Optional[Literal["prev", "next"]] = None


class AccessMapRowRead(BaseModel):
    provider: str
    account: str
    fingerprint: str
    resource: str
    permissions: List[str]

    class Config:
        from_attributes = True


class ResourceNodeRead(BaseModel):
    label: str
    permissions_label: str
    row: AccessMapRowRead

    class Config:
        from_attributes = True


class AccountNodeRead(BaseModel):
    name: str
    resources: List[ResourceNodeRead]

    class Config:
        from_attributes = True


class ProviderNodeRead(BaseModel):
    name: str
    accounts: List[AccountNodeRead]

    class Config:
        from_attributes = True


class AccessTreeRead(BaseModel):
    providers: List[ProviderNodeRead]
    search: str
    empty: bool
    message: Optional[str] = None

    class Config:
        from_attributes = True


class StatsRead(BaseModel):
    findings: int
    critical: int
    high: int
    medium: int
    validated: int
    access_map_rows: int

    class Config:
        from_attributes = True


class LoadResponse(BaseModel):
    findings: int
    access_map_rows: int
    stats: StatsRead


class FetchRequest(BaseModel):
    url: Optional[str] = None
