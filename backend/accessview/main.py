from __future__ import annotations

from typing import Optional

from fastapi import FastAPI, Request

from accessview.config import Settings, get_settings
from accessview.logging_config import configure_logging
from accessview.routes import access_map, findings, reports, web
from accessview.services.session import ReportSession

SECURITY_HEADERS = {
    "Cache-Control": "no-store",
    "Pragma": "no-cache",
    "Referrer-Policy": "no-referrer",
    "X-Content-Type-Options": "nosniff",
    "Content-Security-Policy": (
        "default-src 'self'; style-src 'self' 'unsafe-inline'; "
        "script-src 'self' 'unsafe-inline'; img-src 'self' data:; object-src 'none'"
    ),
}


async def apply_security_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers.update(SECURITY_HEADERS)
    return response


def create_app(settings: Optional[Settings] = None, report: Optional[bytes] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level, settings.json_logs)

    app = FastAPI(title=settings.app_name)
    app.state.settings = settings
    app.state.embedded_report = report
    app.state.session = ReportSession(
        page_size=settings.default_page_size, sort_field=settings.default_sort_field
    )
    if report is not None:
        app.state.session.load(report)

    app.middleware("http")(apply_security_headers)
    app.include_router(web.router)
    app.include_router(reports.router, prefix="/api")
    app.include_router(findings.router, prefix="/api")
    app.include_router(access_map.router, prefix="/api")

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


app = create_app()
