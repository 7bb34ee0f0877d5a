from __future__ import annotations

from fastapi import APIRouter, Request, Response

router = APIRouter(tags=["web"])

REPORT_MEDIA_TYPE = "application/json; charset=utf-8"


@router.get("/report", name="embedded_report")
def embedded_report(request: Request):
    report = request.app.state.embedded_report
    if report is None:
        return Response(content="Not found", status_code=404, media_type="text/plain")
    return Response(content=report, media_type=REPORT_MEDIA_TYPE)


@router.get("/favicon.ico")
def favicon():
    return Response(status_code=204)
