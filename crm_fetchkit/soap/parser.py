"""
SOAP response parsing for the Organization service.

``parse_fetch_result`` turns a RetrieveMultiple response into a PageResult and
raises ParseFault on malformed bodies. ``get_soap_error`` extracts the fault
message from an error response and never raises: when nothing usable can be
found it returns ``GENERIC_FAULT_MESSAGE`` so the original fault is not masked
by a parse error.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

from lxml import etree

from crm_fetchkit.domain.models import Entity, EntityReference, PageResult
from crm_fetchkit.errors import ParseFault
from crm_fetchkit.soap.namespaces import NS, XSI, qn

GENERIC_FAULT_MESSAGE = "Unknown SOAP fault"

_PARSER = etree.XMLParser(resolve_entities=False, no_network=True)
_XSI_TYPE = qn(XSI, "type")
_XSI_NIL = qn(XSI, "nil")


def _parse_document(raw: bytes) -> etree._Element:
    if not raw:
        raise ParseFault("Response body is empty")
    try:
        return etree.fromstring(raw, parser=_PARSER)
    except (etree.XMLSyntaxError, ValueError) as exc:
        raise ParseFault(f"Response is not well-formed XML: {exc}") from exc


def _parse_datetime(text: str) -> datetime:
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    # the service serializes UTC
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _decode_value(value: Optional[etree._Element]) -> Any:
    """Decode a typed ``<b:value>`` element into a Python value."""
    if value is None or value.get(_XSI_NIL) == "true":
        return None

    value_type = (value.get(_XSI_TYPE) or "").rsplit(":", 1)[-1]
    text = value.text or ""

    if value_type in ("int", "long", "short"):
        return int(text)
    if value_type == "decimal":
        return Decimal(text)
    if value_type in ("double", "float"):
        return float(text)
    if value_type == "boolean":
        return text.strip().lower() == "true"
    if value_type == "dateTime":
        return _parse_datetime(text)
    if value_type == "EntityReference":
        return EntityReference(
            id=value.findtext("a:Id", namespaces=NS) or "",
            logical_name=value.findtext("a:LogicalName", namespaces=NS) or "",
            name=value.findtext("a:Name", namespaces=NS) or None,
        )
    if value_type == "OptionSetValue":
        return int(value.findtext("a:Value", namespaces=NS))
    if value_type == "Money":
        return Decimal(value.findtext("a:Value", namespaces=NS))
    if value_type == "AliasedValue":
        return _decode_value(value.find("a:Value", NS))
    # string, guid and anything unknown
    return text


def _parse_entity(element: etree._Element) -> Entity:
    attributes: Dict[str, Any] = {}
    for pair in element.iterfind("a:Attributes/a:KeyValuePairOfstringanyType", NS):
        key = pair.findtext("b:key", namespaces=NS)
        attributes[key] = _decode_value(pair.find("b:value", NS))

    formatted_values: Dict[str, str] = {}
    for pair in element.iterfind("a:FormattedValues/a:KeyValuePairOfstringstring", NS):
        formatted_values[pair.findtext("b:key", namespaces=NS)] = (
            pair.findtext("b:value", namespaces=NS) or ""
        )

    return Entity(
        id=element.findtext("a:Id", namespaces=NS) or None,
        logical_name=element.findtext("a:LogicalName", namespaces=NS) or "",
        attributes=attributes,
        formatted_values=formatted_values,
    )


def parse_fetch_result(raw: bytes) -> PageResult:
    """
    Parse a RetrieveMultiple response into its entities and paging details.

    Raises
    ------
    ParseFault
        If the body is not XML, carries no entity collection, or holds values
        that cannot be decoded.
    """
    root = _parse_document(raw)
    entities_element = root.find(".//a:Entities", NS)
    if entities_element is None:
        raise ParseFault("Response does not contain an entity collection")
    collection = entities_element.getparent()

    try:
        entities = tuple(
            _parse_entity(element) for element in entities_element.iterfind("a:Entity", NS)
        )
    except (ValueError, TypeError, InvalidOperation) as exc:
        raise ParseFault(f"Could not decode entity attributes: {exc}") from exc

    cookie_element = collection.find("a:PagingCookie", NS)
    paging_cookie = None
    if cookie_element is not None and cookie_element.get(_XSI_NIL) != "true":
        paging_cookie = cookie_element.text

    more_records = (collection.findtext("a:MoreRecords", namespaces=NS) or "").strip() == "true"

    return PageResult(entities=entities, paging_cookie=paging_cookie, more_records=more_records)


def get_soap_error(raw: Optional[bytes]) -> str:
    """
    Extract the fault message from an error response.

    Looks at the SOAP 1.1 ``faultstring``, the SOAP 1.2 ``Reason/Text`` and the
    OrganizationServiceFault ``Message`` in that order.
    """
    if not raw:
        return GENERIC_FAULT_MESSAGE
    try:
        root = etree.fromstring(raw, parser=_PARSER)
    except (etree.XMLSyntaxError, ValueError):
        return GENERIC_FAULT_MESSAGE

    for path in (".//{*}faultstring", ".//{*}Reason/{*}Text", ".//{*}Message"):
        message = root.findtext(path)
        if message and message.strip():
            return message.strip()
    return GENERIC_FAULT_MESSAGE


__all__ = ["GENERIC_FAULT_MESSAGE", "get_soap_error", "parse_fetch_result"]
