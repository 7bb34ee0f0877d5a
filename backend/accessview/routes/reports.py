from __future__ import annotations

import asyncio

from fastapi import APIRouter, Depends, HTTPException, Request, Response

from accessview import schemas
from accessview.adapters.embedded import fetch_embedded_report
from accessview.errors import ReportFetchError
from accessview.routes.deps import get_loaded_session, get_session
from accessview.services.reporting import JSON_EXPORT_FILENAME
from accessview.services.session import LoadResult, ReportSession

# Handlers are async and only await while acquiring a payload, so session
# state is never touched by two requests at once.
router = APIRouter(prefix="/report", tags=["reports"])


def _load_response(session: ReportSession, result: LoadResult) -> schemas.LoadResponse:
    if not result.has_data:
        raise HTTPException(status_code=422, detail="No data found in report")
    return schemas.LoadResponse(
        findings=result.findings,
        access_map_rows=result.access_map_rows,
        stats=schemas.StatsRead.model_validate(session.stats()),
    )


@router.post("", response_model=schemas.LoadResponse)
async def load_report(request: Request, session: ReportSession = Depends(get_session)):
    payload = await request.body()
    if not payload.strip():
        raise HTTPException(status_code=400, detail="Report body is empty")
    return _load_response(session, session.load(payload))


@router.post("/fetch", response_model=schemas.LoadResponse)
async def fetch_report(
    payload: schemas.FetchRequest, request: Request, session: ReportSession = Depends(get_session)
):
    settings = request.app.state.settings
    # Loads begun before this one are superseded even if the fetch fails.
    token = session.begin_load()
    try:
        body = await asyncio.to_thread(
            fetch_embedded_report,
            payload.url or settings.report_url,
            timeout=settings.fetch_timeout_seconds,
        )
    except ReportFetchError as exc:
        raise HTTPException(status_code=502, detail=str(exc))
    if body is None:
        raise HTTPException(status_code=404, detail="No embedded report available")
    result = session.complete_load(token, body)
    if result.superseded:
        raise HTTPException(status_code=409, detail="A newer report load replaced this one")
    return _load_response(session, result)


@router.delete("", status_code=204)
async def reset_report(session: ReportSession = Depends(get_session)):
    session.reset()
    return Response(status_code=204)


@router.get("/raw")
async def download_report(session: ReportSession = Depends(get_loaded_session)):
    headers = {"Content-Disposition": f"attachment; filename={JSON_EXPORT_FILENAME}"}
    return Response(content=session.export_json(), media_type="application/json", headers=headers)


@router.get("/stats", response_model=schemas.StatsRead)
async def report_stats(session: ReportSession = Depends(get_loaded_session)):
    return session.stats()
