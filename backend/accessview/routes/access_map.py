from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Response

from accessview import schemas
from accessview.routes.deps import get_loaded_session
from accessview.services.session import ReportSession

router = APIRouter(prefix="/access-map", tags=["access-map"])


@router.get("", response_model=schemas.AccessTreeRead)
async def access_tree(
    search: Optional[str] = None, session: ReportSession = Depends(get_loaded_session)
):
    return session.access_tree(search)


@router.get("/rows")
async def access_map_rows(session: ReportSession = Depends(get_loaded_session)):
    text = session.access_map_json()
    if text is None:
        return Response(status_code=204)
    return Response(content=text, media_type="application/json")
