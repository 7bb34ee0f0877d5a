from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
import uvicorn

from accessview.adapters.embedded import fetch_embedded_report
from accessview.config import get_settings
from accessview.errors import ReportFetchError, ReportFileError
from accessview.ingest.files import read_report_file
from accessview.logging_config import configure_logging
from accessview.main import create_app
from accessview.services.access_tree import AccessTree
from accessview.services.query import SortDirection, SortField, ValidationFilter
from accessview.services.session import ReportSession

app = typer.Typer(help="Review secret-scanning reports and their access maps")


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")):
    settings = get_settings()
    configure_logging("DEBUG" if verbose else settings.log_level, settings.json_logs)


def _load_session(report: Path) -> ReportSession:
    settings = get_settings()
    try:
        payload = read_report_file(report, settings.allowed_report_extensions)
    except ReportFileError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=2)

    session = ReportSession(page_size=settings.default_page_size, sort_field=settings.default_sort_field)
    if not session.load(payload).has_data:
        typer.echo(f"No data found in {report}", err=True)
        raise typer.Exit(code=1)
    return session


def _apply_query(
    session: ReportSession,
    search: Optional[str],
    validation: ValidationFilter,
    sort: Optional[SortField],
    desc: bool,
) -> None:
    engine = session.engine
    if search:
        engine.set_text_filter(search)
    engine.set_validation_filter(validation)
    if sort is not None and SortField(sort) is not engine.state.sort_field:
        engine.set_sort(sort)
    if (engine.state.sort_direction is SortDirection.DESC) != desc:
        # Selecting the active field again flips the direction.
        engine.set_sort(engine.state.sort_field)


def _render_tree(tree: AccessTree) -> str:
    if tree.empty:
        return tree.message or ""
    lines = []
    for provider in tree.providers:
        lines.append(provider.name)
        for account in provider.accounts:
            lines.append(f"  {account.name}")
            for resource in account.resources:
                lines.append(f"    {resource.label}  [{resource.permissions_label}]")
    return "\n".join(lines)


@app.command()
def view(
    report: Optional[Path] = typer.Argument(None, help="JSON or JSONL report to serve at /report"),
    port: Optional[int] = typer.Option(None, help="Local port for the viewer"),
    host: Optional[str] = typer.Option(None, help="Interface to bind"),
):
    settings = get_settings()
    payload = None
    if report is not None:
        try:
            payload = read_report_file(report, settings.allowed_report_extensions)
        except ReportFileError as exc:
            typer.echo(str(exc), err=True)
            raise typer.Exit(code=2)

    bind_host = host or settings.host
    bind_port = port or settings.port
    typer.echo(f"Serving access-map viewer at http://{bind_host}:{bind_port} (Ctrl+C to stop)", err=True)
    uvicorn.run(create_app(settings, report=payload), host=bind_host, port=bind_port)


@app.command()
def summary(report: Path):
    stats = _load_session(report).stats()
    typer.echo(f"Findings:        {stats.findings}")
    typer.echo(f"Critical:        {stats.critical}")
    typer.echo(f"High:            {stats.high}")
    typer.echo(f"Medium:          {stats.medium}")
    typer.echo(f"Validated:       {stats.validated}")
    typer.echo(f"Access map rows: {stats.access_map_rows}")


@app.command()
def findings(
    report: Path,
    search: Optional[str] = typer.Option(None, help="Case-insensitive text filter"),
    validation: ValidationFilter = typer.Option(ValidationFilter.ALL, help="Validation status filter"),
    sort: Optional[SortField] = typer.Option(None, help="Sort column"),
    desc: bool = typer.Option(False, "--desc", help="Sort descending"),
    page: int = typer.Option(1, help="Page to show"),
    page_size: Optional[int] = typer.Option(None, min=1, help="Rows per page"),
):
    session = _load_session(report)
    _apply_query(session, search, validation, sort, desc)
    if page_size:
        session.engine.set_page_size(page_size)
    session.engine.set_page(page)

    view_model = session.view()
    for finding in view_model.rows:
        typer.echo(
            "\t".join(
                [
                    finding.rule_id,
                    finding.severity,
                    f"{finding.path}:{finding.line}" if finding.line else finding.path,
                    finding.validation_status or "-",
                    finding.message,
                ]
            )
        )
    typer.echo(
        f"Page {view_model.current_page} of {view_model.total_pages} "
        f"({view_model.filtered_count} of {view_model.total_count} findings)"
    )


@app.command("export-csv")
def export_csv(
    report: Path,
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write CSV to this file"),
    search: Optional[str] = typer.Option(None, help="Case-insensitive text filter"),
    validation: ValidationFilter = typer.Option(ValidationFilter.ALL, help="Validation status filter"),
    sort: Optional[SortField] = typer.Option(None, help="Sort column"),
    desc: bool = typer.Option(False, "--desc", help="Sort descending"),
):
    session = _load_session(report)
    _apply_query(session, search, validation, sort, desc)
    csv_text = session.export_csv()
    if csv_text is None:
        typer.echo("No findings match the current filters.", err=True)
        return
    if output:
        output.write_text(csv_text, encoding="utf-8")
        typer.echo(f"Wrote {output}", err=True)
    else:
        typer.echo(csv_text, nl=False)


@app.command("access-map")
def access_map(
    report: Path,
    search: Optional[str] = typer.Option(None, help="Filter provider, account, resource or permission"),
    as_json: bool = typer.Option(False, "--json", help="Print flattened rows as JSON"),
):
    session = _load_session(report)
    if as_json:
        typer.echo(session.access_map_json() or "[]")
        return
    typer.echo(_render_tree(session.access_tree(search or "")))


@app.command()
def fetch(
    url: Optional[str] = typer.Option(None, help="Base URL of a running viewer"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Save the raw report here"),
):
    settings = get_settings()
    try:
        payload = fetch_embedded_report(url or settings.report_url, timeout=settings.fetch_timeout_seconds)
    except ReportFetchError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)

    if payload is None:
        typer.echo("No embedded report available.")
        return
    if output:
        output.write_bytes(payload)
        typer.echo(f"Wrote {output}", err=True)
        return

    session = ReportSession()
    if not session.load(payload).has_data:
        typer.echo("No data found in embedded report", err=True)
        raise typer.Exit(code=1)
    stats = session.stats()
    typer.echo(f"Findings: {stats.findings}  Access map rows: {stats.access_map_rows}")


if __name__ == "__main__":
    app()
