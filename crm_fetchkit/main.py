from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import List, NoReturn, Optional

import typer

from crm_fetchkit.client import CrmFetchKit
from crm_fetchkit.config import get_settings
from crm_fetchkit.domain.models import Entity
from crm_fetchkit.errors import CrmFetchKitError
from crm_fetchkit.reporter import entities_to_json, print_entities
from crm_fetchkit.utils.logging import configure_logging

app = typer.Typer(help="CRM FetchKit CLI.")


def _client(ctx: typer.Context) -> CrmFetchKit:
    return CrmFetchKit(server_url=ctx.obj.get("server_url"))


def _render(entities: List[Entity], as_json: bool, columns: Optional[List[str]] = None) -> None:
    if as_json:
        typer.echo(entities_to_json(entities))
    else:
        print_entities(entities, columns=columns)


def _fail(exc: CrmFetchKitError) -> NoReturn:
    typer.echo(f"Error: {exc}", err=True)
    raise typer.Exit(code=1)


@app.callback()
def main_options(
    ctx: typer.Context,
    server_url: Optional[str] = typer.Option(
        None,
        "--server-url",
        "-u",
        help="CRM base URL (default from CRM_SERVER_URL).",
    ),
) -> None:
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    ctx.obj = {"server_url": server_url}


@app.command()
def info(ctx: typer.Context) -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    server_url = ctx.obj.get("server_url") or settings.crm_server_url or "<unset>"
    typer.echo(
        f"env={settings.app_env} server={server_url} "
        f"endpoint={settings.crm_soap_endpoint} | "
        f"timeout={settings.crm_timeout_seconds}s max_pages={settings.crm_max_pages}"
    )


@app.command()
def fetch(
    ctx: typer.Context,
    fetch_xml_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="FetchXML file."),
    all_pages: bool = typer.Option(False, "--all", "-a", help="Follow paging cookies to the end."),
    non_blocking: bool = typer.Option(
        False, "--non-blocking", help="Run through the asyncio client instead of blocking calls."
    ),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table."),
) -> None:
    """
    Run a FetchXML query (first page, or every page with --all) and print the rows.
    """
    fetch_xml = fetch_xml_file.read_text(encoding="utf-8")

    async def _run_async() -> List[Entity]:
        async with _client(ctx) as kit:
            if all_pages:
                return await kit.fetch_all(fetch_xml)
            return await kit.fetch(fetch_xml)

    try:
        if non_blocking:
            entities = asyncio.run(_run_async())
        else:
            with _client(ctx) as kit:
                if all_pages:
                    entities = kit.fetch_all_sync(fetch_xml)
                else:
                    entities = kit.fetch_sync(fetch_xml)
    except CrmFetchKitError as exc:
        _fail(exc)
    _render(entities, as_json)


@app.command("get-by-id")
def get_by_id(
    ctx: typer.Context,
    entity_name: str = typer.Argument(..., help="Entity logical name, e.g. account."),
    record_id: str = typer.Argument(..., help="Record GUID."),
    columns: Optional[List[str]] = typer.Option(
        None, "--column", "-c", help="Column to retrieve (repeatable; default all)."
    ),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table."),
) -> None:
    """
    Retrieve a single record by id.
    """
    try:
        with _client(ctx) as kit:
            entity = kit.get_by_id_sync(record_id, entity_name, columns)
    except CrmFetchKitError as exc:
        _fail(exc)

    if entity is None:
        typer.echo(f"No {entity_name} with id {record_id}.", err=True)
        raise typer.Exit(code=1)
    _render([entity], as_json, columns)


@app.command()
def assign(
    ctx: typer.Context,
    entity_name: str = typer.Argument(..., help="Entity logical name of the record."),
    record_id: str = typer.Argument(..., help="Record GUID."),
    assignee_entity_name: str = typer.Argument(..., help="systemuser or team."),
    assignee_id: str = typer.Argument(..., help="Assignee GUID."),
) -> None:
    """
    Assign a record to a user or team.
    """
    try:
        with _client(ctx) as kit:
            kit.assign_sync(record_id, entity_name, assignee_id, assignee_entity_name)
    except CrmFetchKitError as exc:
        _fail(exc)
    typer.echo(f"Assigned {entity_name} {record_id} to {assignee_entity_name} {assignee_id}.")


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
