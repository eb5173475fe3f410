"""
Pagination algorithms for CRM FetchKit, written once for both conventions.

Each algorithm is a generator that yields request payloads and receives the
raw response for each one through ``send``; its return value is the result.
The generators never perform I/O themselves, so the blocking and non-blocking
runners in ``crm_fetchkit.pagination.runners`` drive the exact same steps and
produce identical results for identical server responses.

Pages are strictly sequential: the next request is only yielded after the
previous response has been parsed.
"""

from __future__ import annotations

from typing import Generator, List, Optional

from crm_fetchkit.domain.models import Entity, PageResult
from crm_fetchkit.errors import PaginationLimitExceeded
from crm_fetchkit.soap.messages import build_fetch_request, set_paging_details
from crm_fetchkit.soap.parser import parse_fetch_result
from crm_fetchkit.utils.logging import get_logger

log = get_logger(__name__)


def fetch_page_steps(
    fetch_xml: str,
    page: Optional[int] = None,
    paging_cookie: Optional[str] = None,
) -> Generator[bytes, bytes, PageResult]:
    """
    Exactly one round trip, optionally positioned at ``page``/``paging_cookie``.

    ``more_records`` on the result is reported, never followed.

    Raises
    ------
    ValueError
        If ``paging_cookie`` is given without the ``page`` it positions.
    """
    if paging_cookie is not None and page is None:
        raise ValueError("paging_cookie requires the page number it belongs to")
    if page is not None:
        fetch_xml = set_paging_details(fetch_xml, page, paging_cookie)
    raw = yield build_fetch_request(fetch_xml)
    return parse_fetch_result(raw)


def fetch_all_steps(
    fetch_xml: str,
    max_pages: Optional[int] = None,
) -> Generator[bytes, bytes, List[Entity]]:
    """
    Follow ``more_records``/``paging_cookie`` until the server reports the last page.

    Rows are accumulated in page order, within-page order preserved, without
    deduplication. When a page fails the runner closes the generator and the
    accumulated rows are dropped with it.

    Raises
    ------
    PaginationLimitExceeded
        If ``max_pages`` pages were read and the server still reports more.
        ``None`` or ``0`` disables the ceiling.
    """
    page_number = 1
    records: List[Entity] = []
    page_xml = fetch_xml

    while True:
        raw = yield build_fetch_request(page_xml)
        result = parse_fetch_result(raw)
        records.extend(result.entities)
        log.debug(
            "Fetched page",
            extra={
                "page": page_number,
                "page_rows": len(result.entities),
                "more_records": result.more_records,
            },
        )

        if not result.more_records:
            log.info("Fetch complete", extra={"pages": page_number, "rows": len(records)})
            return records

        if max_pages and page_number >= max_pages:
            raise PaginationLimitExceeded(max_pages)

        page_number += 1
        page_xml = set_paging_details(fetch_xml, page_number, result.paging_cookie)


__all__ = ["fetch_all_steps", "fetch_page_steps"]
