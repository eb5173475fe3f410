"""
Error taxonomy for CRM FetchKit.

Every fault raised by this package derives from CrmFetchKitError. All of them
are terminal for the operation that raised them; nothing in this package
retries.
"""

from __future__ import annotations

from typing import Optional


class CrmFetchKitError(Exception):
    """Base class for all errors raised by CRM FetchKit."""


class TransportFault(CrmFetchKitError):
    """
    A request did not complete with HTTP 200.

    Raised for non-200 responses (with the SOAP fault message extracted from
    the body) and for transport-level failures such as connection errors or
    timeouts (``status_code`` is None in that case).
    """

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(f"CRM SERVER ERROR: {message}")


# Name used for faults reported by the remote service's own error channel.
RemoteFault = TransportFault


class ParseFault(CrmFetchKitError):
    """The response body could not be parsed into a fetch result."""


class CardinalityError(CrmFetchKitError):
    """A lookup expected a single record but the server returned several."""

    def __init__(self, count: int) -> None:
        self.count = count
        super().__init__(f'Expected 1 record, found "{count}"')


class ContextUnavailable(CrmFetchKitError):
    """The CRM server URL could not be resolved."""


class PaginationLimitExceeded(CrmFetchKitError):
    """The server kept reporting more records past the configured page ceiling."""

    def __init__(self, max_pages: int) -> None:
        self.max_pages = max_pages
        super().__init__(
            f"Server still reports more records after {max_pages} pages; "
            "raise max_pages or narrow the query."
        )


__all__ = [
    "CardinalityError",
    "ContextUnavailable",
    "CrmFetchKitError",
    "PaginationLimitExceeded",
    "ParseFault",
    "RemoteFault",
    "TransportFault",
]
