"""
Public client for CRM FetchKit.

Every verb exists in two calling conventions with identical semantics:
the unsuffixed coroutine (non-blocking, the default) and a ``*_sync`` method
that blocks and returns or raises directly.

Usage:
    from crm_fetchkit import CrmFetchKit

    with CrmFetchKit(server_url="https://crm.example.com/contoso") as kit:
        accounts = kit.fetch_all_sync(fetch_xml)

    async with CrmFetchKit(server_url="https://crm.example.com/contoso") as kit:
        account = await kit.get_by_id(account_id, "account", ["name"])
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Union

import httpx

from crm_fetchkit.config import Settings, get_settings
from crm_fetchkit.domain.models import Entity, PageResult
from crm_fetchkit.errors import CardinalityError
from crm_fetchkit.infrastructure.context import ServerContext, UrlResolver
from crm_fetchkit.infrastructure.executor import RequestExecutor
from crm_fetchkit.pagination import fetch_all_steps, fetch_page_steps, run_async, run_sync
from crm_fetchkit.soap.messages import build_assign_request, build_get_by_id_fetch_xml
from crm_fetchkit.utils.logging import get_logger

log = get_logger(__name__)

_UNSET = object()


def _single_or_none(entities: List[Entity]) -> Optional[Entity]:
    if len(entities) > 1:
        raise CardinalityError(len(entities))
    # None, never an implicit default, when nothing matched
    return entities[0] if entities else None


class CrmFetchKit:
    """
    Query and command client for the CRM Organization service.

    Parameters
    ----------
    server_url : str, optional
        CRM base URL. Falls back to ``resolver`` and then ``CRM_SERVER_URL``.
    resolver : callable, optional
        Zero-argument callable returning the base URL; called at most once.
    context : ServerContext, optional
        A pre-built context to share between clients. Overrides the two above.
    max_pages : int, optional
        Page ceiling for ``fetch_all``; defaults to ``CRM_MAX_PAGES``.
        Pass None to disable.
    sync_client, async_client : httpx clients, optional
        Externally managed clients (custom auth, proxies). Left open on close.
    transport, async_transport : httpx transports, optional
        Transports for the blocking and non-blocking clients this instance
        creates itself.
    """

    def __init__(
        self,
        server_url: Optional[str] = None,
        *,
        resolver: Optional[UrlResolver] = None,
        context: Optional[ServerContext] = None,
        settings: Optional[Settings] = None,
        max_pages: Union[int, None, object] = _UNSET,
        timeout_seconds: Optional[float] = None,
        sync_client: Optional[httpx.Client] = None,
        async_client: Optional[httpx.AsyncClient] = None,
        transport: Optional[httpx.BaseTransport] = None,
        async_transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        settings = settings or get_settings()
        self.context = context or ServerContext(
            server_url=server_url, resolver=resolver, settings=settings
        )
        self.max_pages = settings.crm_max_pages if max_pages is _UNSET else max_pages
        if timeout_seconds is None:
            timeout_seconds = settings.crm_timeout_seconds
        self.executor = RequestExecutor(
            self.context,
            sync_client=sync_client,
            async_client=async_client,
            transport=transport,
            async_transport=async_transport,
            timeout_seconds=timeout_seconds,
        )

    # assign

    def assign_sync(
        self, record_id: str, entity_name: str, assignee_id: str, assignee_entity_name: str
    ) -> None:
        """Assign record ``record_id`` to a user or team, blocking."""
        payload = build_assign_request(record_id, entity_name, assignee_id, assignee_entity_name)
        self.executor.execute_sync(payload)
        log.info(
            "Record assigned",
            extra={"entity": entity_name, "record_id": record_id, "assignee_id": assignee_id},
        )

    async def assign(
        self, record_id: str, entity_name: str, assignee_id: str, assignee_entity_name: str
    ) -> None:
        """Assign record ``record_id`` to a user or team."""
        payload = build_assign_request(record_id, entity_name, assignee_id, assignee_entity_name)
        await self.executor.execute_async(payload)
        log.info(
            "Record assigned",
            extra={"entity": entity_name, "record_id": record_id, "assignee_id": assignee_id},
        )

    # single page

    def fetch_more_sync(
        self,
        fetch_xml: str,
        page: Optional[int] = None,
        paging_cookie: Optional[str] = None,
    ) -> PageResult:
        """One page with its paging details; ``more_records`` is not followed."""
        return run_sync(fetch_page_steps(fetch_xml, page, paging_cookie), self.executor.execute_sync)

    async def fetch_more(
        self,
        fetch_xml: str,
        page: Optional[int] = None,
        paging_cookie: Optional[str] = None,
    ) -> PageResult:
        """One page with its paging details; ``more_records`` is not followed."""
        return await run_async(
            fetch_page_steps(fetch_xml, page, paging_cookie), self.executor.execute_async
        )

    def fetch_sync(self, fetch_xml: str) -> List[Entity]:
        return list(self.fetch_more_sync(fetch_xml).entities)

    async def fetch(self, fetch_xml: str) -> List[Entity]:
        """Entities of the first page only."""
        result = await self.fetch_more(fetch_xml)
        return list(result.entities)

    # all pages

    def fetch_all_sync(self, fetch_xml: str) -> List[Entity]:
        """
        Every row of ``fetch_xml`` across all pages, blocking until the last one.

        Raises the first page fault encountered; no partial result is returned.
        """
        return run_sync(fetch_all_steps(fetch_xml, self.max_pages), self.executor.execute_sync)

    async def fetch_all(self, fetch_xml: str) -> List[Entity]:
        """
        Every row of ``fetch_xml`` across all pages.

        Raises the first page fault encountered; no partial result is returned.
        """
        return await run_async(
            fetch_all_steps(fetch_xml, self.max_pages), self.executor.execute_async
        )

    # by id

    def get_by_id_sync(
        self, record_id: str, entity_name: str, columns: Optional[Iterable[str]] = None
    ) -> Optional[Entity]:
        """
        The record with primary key ``record_id``, or None when it does not exist.

        Raises CardinalityError if the server returns more than one row.
        """
        fetch_xml = build_get_by_id_fetch_xml(record_id, entity_name, columns)
        return _single_or_none(self.fetch_sync(fetch_xml))

    async def get_by_id(
        self, record_id: str, entity_name: str, columns: Optional[Iterable[str]] = None
    ) -> Optional[Entity]:
        """
        The record with primary key ``record_id``, or None when it does not exist.

        Raises CardinalityError if the server returns more than one row.
        """
        fetch_xml = build_get_by_id_fetch_xml(record_id, entity_name, columns)
        return _single_or_none(await self.fetch(fetch_xml))

    # lifecycle

    def close(self) -> None:
        self.executor.close()

    async def aclose(self) -> None:
        await self.executor.aclose()

    def __enter__(self) -> "CrmFetchKit":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    async def __aenter__(self) -> "CrmFetchKit":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()


__all__ = ["CrmFetchKit"]
