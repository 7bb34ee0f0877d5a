from __future__ import annotations

from typing import Optional

import requests
import structlog

from accessview.errors import ReportFetchError

logger = structlog.get_logger(__name__)


def fetch_embedded_report(base_url: str, timeout: int = 10) -> Optional[bytes]:
    """
    Fetch the report a viewer process was started with.

    Returns ``None`` when the process has no report (HTTP 404). Any other failure
    raises :class:`ReportFetchError`.
    """

    url = f"{base_url.rstrip('/')}/report"
    try:
        response = requests.get(url, headers={"Cache-Control": "no-store"}, timeout=timeout)
    except requests.RequestException as exc:
        logger.warning("report.fetch_failed", url=url, error=str(exc))
        raise ReportFetchError(f"Failed to load report from CLI: {exc}") from exc

    if response.status_code == 404:
        logger.info("report.fetch_missing", url=url)
        return None
    if not response.ok:
        logger.warning("report.fetch_failed", url=url, status_code=response.status_code)
        raise ReportFetchError(
            f"Failed to load report from CLI: server returned {response.status_code}",
            status_code=response.status_code,
        )
    return response.content
