from __future__ import annotations

import json
import re
from typing import Any, List

import structlog

logger = structlog.get_logger(__name__)

_LINE_BREAK = re.compile(r"\r?\n")


def decode_payload(text: str) -> List[Any]:
    """
    Decode a report body into zero or more root values.

    A single JSON document yields one root. Anything else is read as JSON lines,
    where every line that fails to parse is skipped so partial reports still load.
    """

    try:
        return [json.loads(text)]
    except (ValueError, RecursionError):
        pass

    roots: List[Any] = []
    lines = [line for line in _LINE_BREAK.split(text) if line]
    for number, line in enumerate(lines, start=1):
        try:
            roots.append(json.loads(line))
        except (ValueError, RecursionError) as exc:
            logger.debug("report.line_skipped", line=number, error=str(exc))

    if not roots:
        logger.info("report.decode_empty", lines=len(lines))
    return roots
