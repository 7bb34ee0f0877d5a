from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Tuple

from accessview.normalization.values import as_text, is_present


class AccessMapSchema(str, enum.Enum):
    GROUPED = "grouped"
    LEGACY = "legacy"


@dataclass(frozen=True)
class AccessMapGroup:
    resources: Tuple[str, ...] = ()
    permissions: Tuple[str, ...] = ()


@dataclass(frozen=True)
class AccessMapEntry:
    provider: str = ""
    account: str = ""
    fingerprint: str = ""
    groups: Tuple[AccessMapGroup, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class AccessMapRow:
    provider: str
    account: str
    fingerprint: str
    resource: str
    permissions: Tuple[str, ...]


def _text_list(value: Any) -> Tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    return tuple(as_text(item) for item in value)


def _split_permissions(value: Any) -> Tuple[str, ...]:
    return tuple(token.strip() for token in as_text(value).split(",") if token.strip())


def detect_schema(entries: List[Any]) -> AccessMapSchema:
    """One grouped entry switches the whole sequence to the grouped schema."""

    if any(isinstance(entry, dict) and isinstance(entry.get("groups"), list) for entry in entries):
        return AccessMapSchema.GROUPED
    return AccessMapSchema.LEGACY


def _grouped_entry(entry: dict) -> AccessMapEntry:
    groups = entry.get("groups")
    return AccessMapEntry(
        provider=as_text(entry.get("provider")),
        account=as_text(entry.get("account")),
        fingerprint=as_text(entry.get("fingerprint")),
        groups=tuple(
            AccessMapGroup(
                resources=_text_list(group.get("resources")) if isinstance(group, dict) else (),
                permissions=_text_list(group.get("permissions")) if isinstance(group, dict) else (),
            )
            for group in (groups if isinstance(groups, list) else [])
        ),
    )


def _legacy_entry(entry: dict) -> AccessMapEntry:
    resource = entry.get("resource")
    if isinstance(entry.get("permissions"), list):
        permissions = _text_list(entry["permissions"])
    elif is_present(entry.get("permission")):
        permissions = _split_permissions(entry["permission"])
    else:
        permissions = ()

    return AccessMapEntry(
        provider=as_text(entry.get("provider")),
        account=as_text(entry.get("account")),
        fingerprint=as_text(entry.get("fingerprint")),
        groups=(
            AccessMapGroup(
                resources=(as_text(resource),) if is_present(resource) else (),
                permissions=permissions,
            ),
        ),
    )


def normalize_access_map(entries: Any) -> List[AccessMapEntry]:
    if not isinstance(entries, list):
        return []

    build = _grouped_entry if detect_schema(entries) is AccessMapSchema.GROUPED else _legacy_entry
    return [build(entry if isinstance(entry, dict) else {}) for entry in entries]


def flatten_access_map(entries: Iterable[AccessMapEntry]) -> List[AccessMapRow]:
    return [
        AccessMapRow(
            provider=entry.provider,
            account=entry.account,
            fingerprint=entry.fingerprint,
            resource=resource,
            permissions=group.permissions,
        )
        for entry in entries
        for group in entry.groups
        for resource in group.resources
    ]
