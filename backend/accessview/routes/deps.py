from __future__ import annotations

from fastapi import HTTPException, Request

from accessview.services.session import ReportSession


def get_session(request: Request) -> ReportSession:
    return request.app.state.session


def get_loaded_session(request: Request) -> ReportSession:
    session = get_session(request)
    if not session.loaded:
        raise HTTPException(status_code=404, detail="No report loaded")
    return session
