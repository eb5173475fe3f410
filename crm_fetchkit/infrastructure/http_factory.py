"""
HTTP client factory utilities for CRM FetchKit.

Provides centralized construction of sync and async httpx clients carrying the
fixed header set the Organization service ``Execute`` contract requires.
Executors that build a client through this module own it and close it.
"""

from __future__ import annotations

from typing import Dict, Optional

import httpx

from crm_fetchkit.config import get_settings
from crm_fetchkit.soap.namespaces import SOAP_ACTION_EXECUTE

SOAP_HEADERS: Dict[str, str] = {
    "Accept": "application/xml, text/xml, */*",
    "Content-Type": "text/xml; charset=utf-8",
    "SOAPAction": SOAP_ACTION_EXECUTE,
}


def _timeout(timeout_seconds: Optional[float]) -> httpx.Timeout:
    if timeout_seconds is None:
        timeout_seconds = get_settings().crm_timeout_seconds
    return httpx.Timeout(timeout_seconds)


def get_sync_client(
    timeout_seconds: Optional[float] = None,
    transport: Optional[httpx.BaseTransport] = None,
) -> httpx.Client:
    """
    Create a synchronous client for blocking requests.

    Parameters
    ----------
    timeout_seconds : float, optional
        Overall request timeout. Defaults to ``CRM_TIMEOUT_SECONDS``.
    transport : httpx.BaseTransport, optional
        Custom transport (e.g. ``httpx.MockTransport`` in tests).

    Returns
    -------
    httpx.Client
        A new client; the caller is responsible for closing it.
    """
    return httpx.Client(
        timeout=_timeout(timeout_seconds),
        headers=SOAP_HEADERS,
        transport=transport,
    )


def get_async_client(
    timeout_seconds: Optional[float] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """
    Create an asynchronous client for non-blocking requests.

    Parameters
    ----------
    timeout_seconds : float, optional
        Overall request timeout. Defaults to ``CRM_TIMEOUT_SECONDS``.
    transport : httpx.AsyncBaseTransport, optional
        Custom transport (e.g. ``httpx.MockTransport`` in tests).

    Returns
    -------
    httpx.AsyncClient
        A new client; the caller is responsible for closing it.
    """
    return httpx.AsyncClient(
        timeout=_timeout(timeout_seconds),
        headers=SOAP_HEADERS,
        transport=transport,
    )


__all__ = [
    "SOAP_HEADERS",
    "get_async_client",
    "get_sync_client",
]
