"""
Server context resolution for CRM FetchKit.

A ServerContext resolves the CRM base URL once and hands out the memoized value
afterwards. It is an explicit object owned by the client rather than a module
global, so tests and separate tenants can each hold their own.
"""

from __future__ import annotations

import threading
from typing import Callable, Optional

from crm_fetchkit.config import Settings, get_settings
from crm_fetchkit.errors import ContextUnavailable
from crm_fetchkit.utils.logging import get_logger

log = get_logger(__name__)

UrlResolver = Callable[[], Optional[str]]


class ServerContext:
    """
    Thread-safe, resolve-once holder of the CRM server URL.

    Resolution order: explicit ``server_url``, then ``resolver()``, then the
    ``CRM_SERVER_URL`` setting. The first non-empty value wins; trailing slashes
    are stripped.
    """

    def __init__(
        self,
        server_url: Optional[str] = None,
        resolver: Optional[UrlResolver] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self._explicit_url = server_url
        self._resolver = resolver
        self._settings = settings
        self._server_url: Optional[str] = None
        self._lock = threading.Lock()

    def _resolve(self) -> str:
        candidates = [self._explicit_url]
        if self._resolver is not None:
            try:
                candidates.append(self._resolver())
            except Exception as exc:  # noqa: BLE001 - any resolver failure means no context
                raise ContextUnavailable(f"Context is not available: {exc}") from exc
        settings = self._settings or get_settings()
        candidates.append(settings.crm_server_url)

        for url in candidates:
            if url and url.strip():
                return url.strip().rstrip("/")
        raise ContextUnavailable(
            "Context is not available. Pass server_url or set CRM_SERVER_URL."
        )

    @property
    def server_url(self) -> str:
        """The resolved base URL, e.g. ``https://crm.example.com/contoso``."""
        with self._lock:
            if self._server_url is None:
                self._server_url = self._resolve()
                log.debug("Resolved CRM server URL", extra={"server_url": self._server_url})
            return self._server_url

    def endpoint_url(self, relative_path: Optional[str] = None) -> str:
        """Absolute URL of the SOAP endpoint (or ``relative_path`` below the server)."""
        path = relative_path
        if path is None:
            path = (self._settings or get_settings()).crm_soap_endpoint
        if not path.startswith("/"):
            path = "/" + path
        return self.server_url + path


__all__ = ["ServerContext", "UrlResolver"]
