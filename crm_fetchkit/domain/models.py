"""
Domain models for CRM FetchKit.

Defines the records returned by the Organization service (entities and entity
references) and the per-round-trip page result consumed by the pagination
engine. All models are frozen: a PageResult is never mutated after parsing.
"""
from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, Field


class EntityReference(BaseModel):
    """
    Pointer to a record: lookup attribute values and assign targets.
    """

    id: str = Field(..., description="Record id (GUID).")
    logical_name: str = Field(..., description="Entity logical name, e.g. 'systemuser'.")
    name: Optional[str] = Field(None, description="Primary name, when the server sends it.")

    model_config = {
        "frozen": True,
        "populate_by_name": True,
    }


class Entity(BaseModel):
    """
    A single row of a fetch result.
    """

    id: Optional[str] = Field(None, description="Record id (GUID).")
    logical_name: str = Field(..., description="Entity logical name.")
    attributes: Dict[str, Any] = Field(default_factory=dict, description="Decoded column values.")
    formatted_values: Dict[str, str] = Field(
        default_factory=dict, description="Server-formatted display strings."
    )

    model_config = {
        "frozen": True,
        "populate_by_name": True,
    }

    def get_value(self, name: str, default: Any = None) -> Any:
        return self.attributes.get(name, default)

    def get_formatted_value(self, name: str) -> Optional[str]:
        """Display string for ``name``, falling back to the raw value as text."""
        if name in self.formatted_values:
            return self.formatted_values[name]
        value = self.attributes.get(name)
        if value is None:
            return None
        if isinstance(value, EntityReference):
            return value.name
        return str(value)


class PageResult(BaseModel):
    """
    One page of a fetch: its rows plus the cursor needed to request the next.
    """

    entities: Tuple[Entity, ...] = Field(default_factory=tuple)
    paging_cookie: Optional[str] = Field(None, description="Opaque server cursor.")
    more_records: bool = Field(False, description="Whether another page exists.")

    model_config = {
        "frozen": True,
    }


__all__ = ["Entity", "EntityReference", "PageResult"]
