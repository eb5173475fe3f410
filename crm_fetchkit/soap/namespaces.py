"""XML namespaces of the CRM 2011 Organization service SOAP contract."""

from __future__ import annotations

SOAP_ENV = "http://schemas.xmlsoap.org/soap/envelope/"
SERVICES = "http://schemas.microsoft.com/xrm/2011/Contracts/Services"
CONTRACTS = "http://schemas.microsoft.com/xrm/2011/Contracts"
CRM_CONTRACTS = "http://schemas.microsoft.com/crm/2011/Contracts"
GENERIC = "http://schemas.datacontract.org/2004/07/System.Collections.Generic"
XSI = "http://www.w3.org/2001/XMLSchema-instance"
XSD = "http://www.w3.org/2001/XMLSchema"

SOAP_ACTION_EXECUTE = (
    "http://schemas.microsoft.com/xrm/2011/Contracts/Services/IOrganizationService/Execute"
)

# Prefix map for ElementPath lookups in parsed responses.
NS = {
    "s": SOAP_ENV,
    "a": CONTRACTS,
    "b": GENERIC,
    "i": XSI,
}


def qn(namespace: str, tag: str) -> str:
    """Clark-notation qualified name."""
    return f"{{{namespace}}}{tag}"


__all__ = [
    "CONTRACTS",
    "CRM_CONTRACTS",
    "GENERIC",
    "NS",
    "SERVICES",
    "SOAP_ACTION_EXECUTE",
    "SOAP_ENV",
    "XSD",
    "XSI",
    "qn",
]
