from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Sequence

from rich import box
from rich.console import Console
from rich.table import Table

from crm_fetchkit.domain.models import Entity, EntityReference


def _collect_columns(entities: Sequence[Entity]) -> List[str]:
    """Attribute names across all entities, in first-seen order."""
    columns: Dict[str, None] = {}
    for entity in entities:
        for name in entity.attributes:
            columns.setdefault(name, None)
    return list(columns)


def _cell(entity: Entity, column: str) -> str:
    value = entity.get_formatted_value(column)
    return "" if value is None else value


def print_entities(
    entities: Sequence[Entity],
    columns: Optional[Sequence[str]] = None,
    title: Optional[str] = None,
    console: Optional[Console] = None,
) -> None:
    """
    Render fetched entities as a rich table.

    Uses the server-formatted value for each cell when one exists (option set
    labels, lookup names, localized dates) and the raw value otherwise.
    """
    console = console or Console()

    if not entities:
        console.print("[yellow]No records returned.[/yellow]")
        return

    logical_name = entities[0].logical_name
    shown_columns = list(columns) if columns else _collect_columns(entities)

    table = Table(
        title=title or f"{logical_name} ({len(entities):,} records)",
        box=box.ROUNDED,
    )
    table.add_column("Id", style="cyan", no_wrap=True)
    for column in shown_columns:
        table.add_column(column, style="magenta")

    for entity in entities:
        table.add_row(entity.id or "", *(_cell(entity, column) for column in shown_columns))

    console.print(table)


def _jsonable(value: Any) -> Any:
    if isinstance(value, EntityReference):
        return value.model_dump()
    return value


def entities_to_json(entities: Sequence[Entity]) -> str:
    """Serialize entities for machine consumption (``--json`` in the CLI)."""
    payload = [
        {
            "id": entity.id,
            "logical_name": entity.logical_name,
            "attributes": {k: _jsonable(v) for k, v in entity.attributes.items()},
            "formatted_values": entity.formatted_values,
        }
        for entity in entities
    ]
    return json.dumps(payload, indent=2, default=str)


__all__ = ["entities_to_json", "print_entities"]
