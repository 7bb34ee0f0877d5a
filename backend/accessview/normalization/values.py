from __future__ import annotations

import json
from typing import Any


def is_present(value: Any) -> bool:
    """Blank scalars count as missing; empty containers still count as present."""

    if value is None or value is False:
        return False
    if isinstance(value, str):
        return value != ""
    if isinstance(value, (int, float)):
        return value != 0
    return True


def dig(record: Any, *keys: str) -> Any:
    node = record
    for key in keys:
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    return node


def as_text(value: Any) -> str:
    if value is None or isinstance(value, (dict, list)):
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return json.dumps(value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def first_text(record: Any, *candidates: tuple[str, ...]) -> str:
    """Coerce the first candidate location holding a non-null value."""

    for path in candidates:
        value = dig(record, *path)
        if value is not None:
            return as_text(value)
    return ""
