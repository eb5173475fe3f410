"""
SOAP package for CRM FetchKit.

Request builders (FetchXML envelopes, paging details, assign commands) and the
response parser. Everything here is pure: no I/O.
"""

from crm_fetchkit.soap.messages import (
    build_assign_request,
    build_fetch_request,
    build_get_by_id_fetch_xml,
    set_paging_details,
)
from crm_fetchkit.soap.parser import GENERIC_FAULT_MESSAGE, get_soap_error, parse_fetch_result

__all__ = [
    "GENERIC_FAULT_MESSAGE",
    "build_assign_request",
    "build_fetch_request",
    "build_get_by_id_fetch_xml",
    "get_soap_error",
    "parse_fetch_result",
    "set_paging_details",
]
