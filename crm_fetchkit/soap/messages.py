"""
SOAP request builders for the Organization service ``Execute`` operation.

All builders are pure functions of their inputs. FetchXML is treated as an
opaque document except for the paging attributes on its root ``<fetch>``
element, which the pagination engine sets per page.
"""

from __future__ import annotations

from typing import Iterable, Optional

from lxml import etree

from crm_fetchkit.soap.namespaces import (
    CONTRACTS,
    CRM_CONTRACTS,
    GENERIC,
    SERVICES,
    SOAP_ENV,
    XSI,
    qn,
)

_EXECUTE_NSMAP = {
    None: SERVICES,
    "i": XSI,
    "a": CONTRACTS,
    "b": GENERIC,
    "e": CRM_CONTRACTS,
}

_FETCH_PARSER = etree.XMLParser(resolve_entities=False, no_network=True, remove_blank_text=False)


def _execute_request(request_type: str) -> tuple[etree._Element, etree._Element, etree._Element]:
    """Create envelope -> Execute -> request and return (envelope, request, parameters)."""
    envelope = etree.Element(qn(SOAP_ENV, "Envelope"), nsmap={"s": SOAP_ENV})
    body = etree.SubElement(envelope, qn(SOAP_ENV, "Body"))
    execute = etree.SubElement(body, qn(SERVICES, "Execute"), nsmap=_EXECUTE_NSMAP)
    request = etree.SubElement(execute, qn(SERVICES, "request"))
    request.set(qn(XSI, "type"), request_type)
    parameters = etree.SubElement(request, qn(CONTRACTS, "Parameters"))
    return envelope, request, parameters


def _add_parameter(parameters: etree._Element, key: str, value_type: str) -> etree._Element:
    pair = etree.SubElement(parameters, qn(CONTRACTS, "KeyValuePairOfstringanyType"))
    etree.SubElement(pair, qn(GENERIC, "key")).text = key
    value = etree.SubElement(pair, qn(GENERIC, "value"))
    value.set(qn(XSI, "type"), value_type)
    return value


def _add_entity_reference(
    parameters: etree._Element, key: str, record_id: str, logical_name: str
) -> None:
    value = _add_parameter(parameters, key, "a:EntityReference")
    etree.SubElement(value, qn(CONTRACTS, "Id")).text = record_id
    etree.SubElement(value, qn(CONTRACTS, "LogicalName")).text = logical_name
    etree.SubElement(value, qn(CONTRACTS, "Name")).set(qn(XSI, "nil"), "true")


def _finish(envelope: etree._Element, request: etree._Element, request_name: str) -> bytes:
    etree.SubElement(request, qn(CONTRACTS, "RequestId")).set(qn(XSI, "nil"), "true")
    etree.SubElement(request, qn(CONTRACTS, "RequestName")).text = request_name
    return etree.tostring(envelope, encoding="utf-8")


def build_fetch_request(fetch_xml: str) -> bytes:
    """
    Wrap a FetchXML query in a RetrieveMultiple request envelope.

    The query is embedded as text; lxml escapes it on serialization.
    """
    envelope, request, parameters = _execute_request("a:RetrieveMultipleRequest")
    value = _add_parameter(parameters, "Query", "a:FetchExpression")
    etree.SubElement(value, qn(CONTRACTS, "Query")).text = fetch_xml
    return _finish(envelope, request, "RetrieveMultiple")


def build_assign_request(
    record_id: str, entity_name: str, assignee_id: str, assignee_entity_name: str
) -> bytes:
    """Build an AssignRequest that hands record ``record_id`` to a user or team."""
    envelope, request, parameters = _execute_request("e:AssignRequest")
    _add_entity_reference(parameters, "Target", record_id, entity_name)
    _add_entity_reference(parameters, "Assignee", assignee_id, assignee_entity_name)
    return _finish(envelope, request, "Assign")


def set_paging_details(fetch_xml: str, page: int, paging_cookie: Optional[str]) -> str:
    """
    Return a copy of ``fetch_xml`` whose root carries ``page`` and ``paging-cookie``.

    The cookie is stored verbatim as an attribute value; serialization escapes it
    and any XML parser yields the identical string back.
    """
    root = etree.fromstring(fetch_xml.encode("utf-8"), parser=_FETCH_PARSER)
    root.set("page", str(page))
    if paging_cookie is not None:
        root.set("paging-cookie", paging_cookie)
    elif "paging-cookie" in root.attrib:
        del root.attrib["paging-cookie"]
    return etree.tostring(root, encoding="unicode")


def build_get_by_id_fetch_xml(
    record_id: str, entity_name: str, columns: Optional[Iterable[str]] = None
) -> str:
    """FetchXML selecting one record by its primary key (``<entity_name>id``)."""
    fetch = etree.Element(
        "fetch",
        version="1.0",
        mapping="logical",
        distinct="false",
    )
    fetch.set("output-format", "xml-platform")
    entity = etree.SubElement(fetch, "entity", name=entity_name)

    column_names = list(columns or [])
    if column_names:
        for column in column_names:
            etree.SubElement(entity, "attribute", name=column)
    else:
        etree.SubElement(entity, "all-attributes")

    condition_filter = etree.SubElement(entity, "filter", type="and")
    etree.SubElement(
        condition_filter,
        "condition",
        attribute=f"{entity_name}id",
        operator="eq",
        value=record_id,
    )
    return etree.tostring(fetch, encoding="unicode")


__all__ = [
    "build_assign_request",
    "build_fetch_request",
    "build_get_by_id_fetch_xml",
    "set_paging_details",
]
