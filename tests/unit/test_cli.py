from __future__ import annotations

import json

import httpx
import pytest
from typer.testing import CliRunner

from crm_fetchkit import main
from tests.soap_fixtures import (
    ACCOUNT_FETCH_XML,
    FakeCrmServer,
    account,
    account_id,
    assign_response,
    paged_responses,
    soap_fault,
    soap_page,
)

runner = CliRunner()


@pytest.fixture(autouse=True)
def logging_calls(monkeypatch):
    """Keep the CLI from reconfiguring root logging during tests."""
    calls = []
    monkeypatch.setattr(main, "configure_logging", lambda **kwargs: calls.append(kwargs))
    return calls


@pytest.fixture()
def fetch_xml_file(tmp_path):
    path = tmp_path / "accounts.xml"
    path.write_text(ACCOUNT_FETCH_XML, encoding="utf-8")
    return path


@pytest.fixture()
def serve(monkeypatch, make_kit):
    """Point the CLI at a FakeCrmServer replaying ``responses``."""

    def _serve(responses) -> FakeCrmServer:
        server = FakeCrmServer(responses)
        monkeypatch.setattr(main, "_client", lambda ctx: make_kit(server))
        return server

    return _serve


def test_info_shows_effective_server_url() -> None:
    result = runner.invoke(main.app, ["--server-url", "https://crm.example.com/org", "info"])

    assert result.exit_code == 0
    assert "server=https://crm.example.com/org" in result.output
    assert "/XRMServices/2011/Organization.svc/web" in result.output


def test_info_shows_application_environment(monkeypatch, test_settings) -> None:
    staging = test_settings.model_copy(update={"app_env": "staging"})
    monkeypatch.setattr(main, "get_settings", lambda: staging)

    result = runner.invoke(main.app, ["info"])

    assert result.exit_code == 0
    assert "env=staging" in result.output
    assert f"max_pages={staging.crm_max_pages}" in result.output


def test_callback_configures_logging(logging_calls) -> None:
    runner.invoke(main.app, ["info"])

    assert len(logging_calls) == 1
    assert "level" in logging_calls[0]


def test_fetch_prints_first_page_as_json(serve, fetch_xml_file) -> None:
    server = serve(paged_responses([2, 2]))

    result = runner.invoke(main.app, ["fetch", str(fetch_xml_file), "--json"])

    assert result.exit_code == 0
    rows = json.loads(result.stdout)
    assert [row["id"] for row in rows] == [account_id(1), account_id(2)]
    assert rows[0]["attributes"]["name"] == "Account 1"
    assert len(server.requests) == 1


def test_fetch_all_follows_every_page(serve, fetch_xml_file) -> None:
    server = serve(paged_responses([2, 2, 1]))

    result = runner.invoke(main.app, ["fetch", str(fetch_xml_file), "--all", "--json"])

    assert result.exit_code == 0
    assert len(json.loads(result.stdout)) == 5
    assert len(server.requests) == 3


def test_fetch_all_non_blocking(serve, fetch_xml_file) -> None:
    serve(paged_responses([1, 1]))

    result = runner.invoke(
        main.app, ["fetch", str(fetch_xml_file), "--all", "--non-blocking", "--json"]
    )

    assert result.exit_code == 0
    assert [row["id"] for row in json.loads(result.stdout)] == [account_id(1), account_id(2)]


def test_fetch_renders_table(serve, fetch_xml_file) -> None:
    serve([soap_page([account(1)])])

    result = runner.invoke(main.app, ["fetch", str(fetch_xml_file)])

    assert result.exit_code == 0
    assert "Account 1" in result.output


def test_fetch_reports_server_fault(serve, fetch_xml_file) -> None:
    serve([httpx.Response(500, content=soap_fault("Invalid FetchXML"))])

    result = runner.invoke(main.app, ["fetch", str(fetch_xml_file)])

    assert result.exit_code == 1
    assert "CRM SERVER ERROR: Invalid FetchXML" in result.output


def test_get_by_id_not_found_exits_nonzero(serve) -> None:
    serve([soap_page([])])

    result = runner.invoke(main.app, ["get-by-id", "account", account_id(9)])

    assert result.exit_code == 1
    assert "No account with id" in result.output


def test_get_by_id_passes_columns(serve) -> None:
    server = serve([soap_page([account(3)])])

    result = runner.invoke(
        main.app, ["get-by-id", "account", account_id(3), "-c", "name", "--json"]
    )

    assert result.exit_code == 0
    assert json.loads(result.stdout)[0]["id"] == account_id(3)
    assert [a.get("name") for a in server.fetch_root(0).iter("attribute")] == ["name"]


def test_assign_confirms(serve) -> None:
    serve([assign_response()])

    result = runner.invoke(
        main.app, ["assign", "account", account_id(1), "systemuser", "user-1"]
    )

    assert result.exit_code == 0
    assert "Assigned account" in result.output
