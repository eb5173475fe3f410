"""
Request executor: one SOAP round trip against the Organization service.

The executor offers two calling conventions over the same semantics:

- ``execute_sync`` blocks until the response arrives and returns the body.
- ``execute_async`` is a coroutine that resolves with the body.

Both normalize failures into TransportFault: non-200 responses carry the SOAP
fault message extracted from the body, transport errors (connect, timeout,
protocol) carry the httpx error text. Nothing is retried.
"""

from __future__ import annotations

from typing import Awaitable, Optional, Union

import httpx

from crm_fetchkit.errors import TransportFault
from crm_fetchkit.infrastructure.context import ServerContext
from crm_fetchkit.infrastructure.http_factory import get_async_client, get_sync_client
from crm_fetchkit.soap.parser import get_soap_error
from crm_fetchkit.utils.logging import get_logger

log = get_logger(__name__)


class RequestExecutor:
    """
    Executes request payloads against the context's SOAP endpoint.

    Clients passed in are used as-is and left open; clients the executor builds
    itself (lazily, via the http factory) are closed by ``close``/``aclose``.
    ``transport`` goes to the owned blocking client and ``async_transport`` to
    the owned non-blocking one.
    """

    def __init__(
        self,
        context: ServerContext,
        sync_client: Optional[httpx.Client] = None,
        async_client: Optional[httpx.AsyncClient] = None,
        transport: Optional[httpx.BaseTransport] = None,
        async_transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout_seconds: Optional[float] = None,
    ) -> None:
        self.context = context
        self._sync_client = sync_client
        self._async_client = async_client
        self._owns_sync_client = sync_client is None
        self._owns_async_client = async_client is None
        self._transport = transport
        self._async_transport = async_transport
        self._timeout_seconds = timeout_seconds

    def _get_sync_client(self) -> httpx.Client:
        if self._sync_client is None:
            self._sync_client = get_sync_client(self._timeout_seconds, transport=self._transport)
        return self._sync_client

    def _get_async_client(self) -> httpx.AsyncClient:
        if self._async_client is None:
            self._async_client = get_async_client(
                self._timeout_seconds, transport=self._async_transport
            )
        return self._async_client

    def _handle_response(self, url: str, response: httpx.Response) -> bytes:
        if response.status_code == 200:
            return response.content

        message = get_soap_error(response.content)
        log.warning(
            "CRM request failed",
            extra={"url": url, "status_code": response.status_code, "fault": message},
        )
        raise TransportFault(message, status_code=response.status_code)

    @staticmethod
    def _transport_fault(url: str, exc: httpx.TransportError) -> TransportFault:
        message = f"{type(exc).__name__}: {exc}"
        log.warning("CRM transport error", extra={"url": url, "fault": message})
        return TransportFault(message)

    def execute_sync(self, payload: bytes) -> bytes:
        """
        Perform the round trip, blocking until it completes.

        Raises
        ------
        TransportFault
            On any non-200 status or transport failure.
        ContextUnavailable
            If the server URL cannot be resolved.
        """
        url = self.context.endpoint_url()
        log.debug("POST (blocking)", extra={"url": url, "bytes": len(payload)})
        try:
            response = self._get_sync_client().post(url, content=payload)
        except httpx.TransportError as exc:
            raise self._transport_fault(url, exc) from exc
        return self._handle_response(url, response)

    async def execute_async(self, payload: bytes) -> bytes:
        """Non-blocking counterpart of ``execute_sync``; same faults."""
        url = self.context.endpoint_url()
        log.debug("POST (non-blocking)", extra={"url": url, "bytes": len(payload)})
        try:
            response = await self._get_async_client().post(url, content=payload)
        except httpx.TransportError as exc:
            raise self._transport_fault(url, exc) from exc
        return self._handle_response(url, response)

    def execute(self, payload: bytes, blocking: bool = False) -> Union[bytes, Awaitable[bytes]]:
        """
        Dispatch on calling convention. Non-blocking unless ``blocking=True``:
        the default returns an awaitable, ``blocking=True`` returns the body.
        """
        if blocking:
            return self.execute_sync(payload)
        return self.execute_async(payload)

    def close(self) -> None:
        """Close the owned synchronous client."""
        if self._owns_sync_client and self._sync_client is not None:
            self._sync_client.close()
            self._sync_client = None

    async def aclose(self) -> None:
        """Close every owned client."""
        self.close()
        if self._owns_async_client and self._async_client is not None:
            await self._async_client.aclose()
            self._async_client = None

    def __enter__(self) -> "RequestExecutor":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    async def __aenter__(self) -> "RequestExecutor":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()


__all__ = ["RequestExecutor"]
