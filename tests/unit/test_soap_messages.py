from __future__ import annotations

from lxml import etree

from crm_fetchkit.soap.messages import (
    build_assign_request,
    build_fetch_request,
    build_get_by_id_fetch_xml,
    set_paging_details,
)
from crm_fetchkit.soap.namespaces import CONTRACTS, GENERIC, XSI, qn
from tests.soap_fixtures import ACCOUNT_FETCH_XML, cookie_for_page

NS = {"a": CONTRACTS, "b": GENERIC}


def _parameters(envelope: bytes) -> dict[str, etree._Element]:
    root = etree.fromstring(envelope)
    return {
        pair.findtext("b:key", namespaces=NS): pair.find("b:value", NS)
        for pair in root.iterfind(".//a:Parameters/a:KeyValuePairOfstringanyType", NS)
    }


def test_fetch_request_embeds_fetch_xml_unchanged() -> None:
    envelope = build_fetch_request(ACCOUNT_FETCH_XML)
    root = etree.fromstring(envelope)

    assert root.findtext(".//a:RequestName", namespaces=NS) == "RetrieveMultiple"
    query_value = _parameters(envelope)["Query"]
    assert query_value.get(qn(XSI, "type")) == "a:FetchExpression"
    assert query_value.findtext("a:Query", namespaces=NS) == ACCOUNT_FETCH_XML


def test_fetch_request_declares_prefixes_used_in_type_attributes() -> None:
    root = etree.fromstring(build_fetch_request(ACCOUNT_FETCH_XML))
    request = root.find(".//{http://schemas.microsoft.com/xrm/2011/Contracts/Services}request")

    assert request.get(qn(XSI, "type")) == "a:RetrieveMultipleRequest"
    assert request.nsmap["a"] == CONTRACTS


def test_set_paging_details_adds_page_and_cookie() -> None:
    cookie = cookie_for_page(1)

    paged = set_paging_details(ACCOUNT_FETCH_XML, 2, cookie)
    root = etree.fromstring(paged)

    assert root.get("page") == "2"
    assert root.get("paging-cookie") == cookie
    # the query itself is untouched
    assert [a.get("name") for a in root.iter("attribute")] == ["name", "accountid"]


def test_set_paging_details_replaces_previous_paging_attributes() -> None:
    first = set_paging_details(ACCOUNT_FETCH_XML, 2, cookie_for_page(1))

    second = etree.fromstring(set_paging_details(first, 3, cookie_for_page(2)))

    assert second.get("page") == "3"
    assert second.get("paging-cookie") == cookie_for_page(2)


def test_set_paging_details_without_cookie_drops_stale_cookie() -> None:
    first = set_paging_details(ACCOUNT_FETCH_XML, 2, cookie_for_page(1))

    root = etree.fromstring(set_paging_details(first, 1, None))

    assert root.get("page") == "1"
    assert "paging-cookie" not in root.attrib


def test_get_by_id_fetch_xml_filters_on_primary_key() -> None:
    fetch_xml = build_get_by_id_fetch_xml("abc-123", "contact", ["fullname", "emailaddress1"])
    root = etree.fromstring(fetch_xml)

    entity = root.find("entity")
    assert entity.get("name") == "contact"
    assert [a.get("name") for a in entity.iterfind("attribute")] == ["fullname", "emailaddress1"]
    condition = entity.find("filter/condition")
    assert condition.get("attribute") == "contactid"
    assert condition.get("operator") == "eq"
    assert condition.get("value") == "abc-123"


def test_get_by_id_fetch_xml_without_columns_requests_all_attributes() -> None:
    root = etree.fromstring(build_get_by_id_fetch_xml("abc-123", "account"))

    assert root.find("entity/all-attributes") is not None
    assert root.find("entity/attribute") is None


def test_assign_request_carries_target_and_assignee() -> None:
    envelope = build_assign_request("rec-1", "account", "user-9", "systemuser")
    root = etree.fromstring(envelope)
    parameters = _parameters(envelope)

    assert root.findtext(".//a:RequestName", namespaces=NS) == "Assign"
    target = parameters["Target"]
    assert target.get(qn(XSI, "type")) == "a:EntityReference"
    assert target.findtext("a:Id", namespaces=NS) == "rec-1"
    assert target.findtext("a:LogicalName", namespaces=NS) == "account"
    assignee = parameters["Assignee"]
    assert assignee.findtext("a:Id", namespaces=NS) == "user-9"
    assert assignee.findtext("a:LogicalName", namespaces=NS) == "systemuser"
