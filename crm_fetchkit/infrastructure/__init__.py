"""
Infrastructure package for CRM FetchKit.

Centralizes I/O concerns: server URL resolution, httpx client factories, and
the request executor. Keep this layer free of pagination logic.
"""

from crm_fetchkit.infrastructure.context import ServerContext
from crm_fetchkit.infrastructure.executor import RequestExecutor
from crm_fetchkit.infrastructure.http_factory import (
    SOAP_HEADERS,
    get_async_client,
    get_sync_client,
)

__all__ = [
    "SOAP_HEADERS",
    "RequestExecutor",
    "ServerContext",
    "get_async_client",
    "get_sync_client",
]
