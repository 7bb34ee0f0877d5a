from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from accessview import schemas
from accessview.routes.deps import get_loaded_session
from accessview.services.reporting import CSV_EXPORT_FILENAME
from accessview.services.session import ReportSession

router = APIRouter(prefix="/findings", tags=["findings"])


@router.get("", response_model=schemas.FindingsPage)
async def list_findings(session: ReportSession = Depends(get_loaded_session)):
    return session.view()


@router.post("/query", response_model=schemas.FindingsPage)
async def update_query(
    payload: schemas.QueryUpdate, session: ReportSession = Depends(get_loaded_session)
):
    engine = session.engine
    if payload.text is not None:
        engine.set_text_filter(payload.text)
    if payload.validation is not None:
        engine.set_validation_filter(payload.validation)
    if payload.page_size is not None:
        engine.set_page_size(payload.page_size)
    if payload.sort is not None:
        engine.set_sort(payload.sort)
    if payload.page is not None:
        engine.set_page(payload.page)
    if payload.step == "prev":
        engine.previous_page()
    elif payload.step == "next":
        engine.next_page()
    return session.view()


@router.get("/export.csv")
async def export_findings_csv(session: ReportSession = Depends(get_loaded_session)):
    csv_text = session.export_csv()
    if csv_text is None:
        return Response(status_code=204)
    headers = {"Content-Disposition": f"attachment; filename={CSV_EXPORT_FILENAME}"}
    return Response(content=csv_text, media_type="text/csv", headers=headers)
