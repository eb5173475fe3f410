"""
Domain package for CRM FetchKit.

Exports the records and page results shared by the parser, the pagination
engine, and the client. Keep this package focused on data definitions.
"""

from crm_fetchkit.domain.models import Entity, EntityReference, PageResult

__all__ = [
    "Entity",
    "EntityReference",
    "PageResult",
]
