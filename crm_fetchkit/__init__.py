"""
CRM FetchKit - FetchXML data access for the CRM 2011 Organization service.

This package builds SOAP request envelopes, executes them in blocking or
non-blocking mode, parses responses into entities, and follows server paging
cookies to assemble complete result sets:

- Single-page fetches (``fetch`` / ``fetch_more``)
- Paginated fetch-all with a configurable page ceiling
- Single-record lookups by id
- Record assignment to users and teams

Every operation is offered as a coroutine and as a blocking ``*_sync`` method
with identical semantics.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from crm_fetchkit.client import CrmFetchKit
from crm_fetchkit.config import Settings, get_settings
from crm_fetchkit.domain.models import Entity, EntityReference, PageResult
from crm_fetchkit.errors import (
    CardinalityError,
    ContextUnavailable,
    CrmFetchKitError,
    PaginationLimitExceeded,
    ParseFault,
    RemoteFault,
    TransportFault,
)
from crm_fetchkit.infrastructure.context import ServerContext
from crm_fetchkit.infrastructure.executor import RequestExecutor
from crm_fetchkit.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Client
    "CrmFetchKit",
    "RequestExecutor",
    "ServerContext",
    # Domain
    "Entity",
    "EntityReference",
    "PageResult",
    # Errors
    "CardinalityError",
    "ContextUnavailable",
    "CrmFetchKitError",
    "PaginationLimitExceeded",
    "ParseFault",
    "RemoteFault",
    "TransportFault",
    # Logging
    "configure_logging",
    "get_logger",
]
