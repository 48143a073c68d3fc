from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx
import pytest
import typer
from typer.testing import CliRunner

from cli.app import app, parse_value
from cli.client import ApiClient
from cli.config import CLIConfig, load_config

READING = {
    "id": "abc123",
    "value1": 1,
    "value2": 2.5,
    "value3": "warm",
    "value4": None,
    "value5": True,
    "timestamp": "2024:01:01 05:30:00",
    "createdAt": "2024-01-01T00:00:00+00:00",
}


class StubClient:
    def __init__(self, config) -> None:
        self.config = config
        self.saved: Optional[Dict[str, Any]] = None
        self.list_calls: List[tuple] = []
        self.range_calls: List[tuple] = []
        self.deleted: List[str] = []
        self.closed = False

    def health(self) -> Dict[str, Any]:
        return {"status": "healthy", "message": "Server is operational"}

    def routes(self) -> Dict[str, Any]:
        return {
            "message": "Available API routes",
            "routes": [{"method": "GET", "path": "/health", "description": "Health check"}],
            "baseUrl": "http://localhost:3001",
        }

    def save(self, values: Dict[str, Any]) -> Dict[str, Any]:
        self.saved = values
        return {"message": "Data saved successfully", "id": "abc123", "timestamp": READING["timestamp"]}

    def list_readings(self, limit=None, order_by=None, order=None) -> Dict[str, Any]:
        self.list_calls.append((limit, order_by, order))
        return {"message": "Data retrieved successfully", "data": [READING], "count": 1}

    def get_reading(self, reading_id: str) -> Dict[str, Any]:
        return {"message": "Data retrieved successfully", "data": dict(READING, id=reading_id)}

    def latest(self) -> Dict[str, Any]:
        return {"message": "No data found", "data": None}

    def range(self, start_date: str, end_date: str, limit=None) -> Dict[str, Any]:
        self.range_calls.append((start_date, end_date, limit))
        return {
            "message": "No data found in the specified range",
            "data": [],
            "count": 0,
            "range": {"startDate": start_date, "endDate": end_date},
        }

    def delete(self, reading_id: str) -> Dict[str, Any]:
        self.deleted.append(reading_id)
        return {"message": "Data deleted successfully", "id": reading_id}

    def close(self) -> None:
        self.closed = True


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def stub(monkeypatch) -> StubClient:
    instance = StubClient(config=None)

    def factory(config):
        instance.config = config
        return instance

    monkeypatch.setattr("cli.app.ApiClient", factory)
    return instance


def test_parse_value() -> None:
    assert parse_value("1") == 1
    assert parse_value("2.5") == 2.5
    assert parse_value("null") is None
    assert parse_value("true") is True
    assert parse_value("warm") == "warm"


def test_health(runner: CliRunner, stub: StubClient) -> None:
    result = runner.invoke(app, ["health"])

    assert result.exit_code == 0
    assert "healthy: Server is operational" in result.stdout
    assert stub.closed is True


def test_routes_uses_base_url_option(runner: CliRunner, stub: StubClient) -> None:
    result = runner.invoke(app, ["--base-url", "http://sensors:9000/", "routes"])

    assert result.exit_code == 0
    assert stub.config.base_url == "http://sensors:9000"
    assert "/health" in result.stdout


def test_save_sends_five_values(runner: CliRunner, stub: StubClient) -> None:
    result = runner.invoke(app, ["save", "1", "2.5", "warm", "null", "true"])

    assert result.exit_code == 0
    assert stub.saved == {"value1": 1, "value2": 2.5, "value3": "warm", "value4": None, "value5": True}
    assert "id=abc123" in result.stdout


def test_save_requires_exactly_five_values(runner: CliRunner, stub: StubClient) -> None:
    result = runner.invoke(app, ["save", "1", "2"])

    assert result.exit_code != 0
    assert stub.saved is None


def test_list_passes_query_options(runner: CliRunner, stub: StubClient) -> None:
    result = runner.invoke(app, ["list", "--limit", "5", "--order-by", "value1", "--order", "asc"])

    assert result.exit_code == 0
    assert stub.list_calls == [(5, "value1", "asc")]
    assert "count: 1" in result.stdout
    assert "value3: warm" in result.stdout


def test_get_and_latest(runner: CliRunner, stub: StubClient) -> None:
    got = runner.invoke(app, ["get", "xyz"])
    latest = runner.invoke(app, ["latest"])

    assert got.exit_code == 0
    assert "id: xyz" in got.stdout
    assert latest.exit_code == 0
    assert "No reading available." in latest.stdout


def test_range_and_delete(runner: CliRunner, stub: StubClient) -> None:
    ranged = runner.invoke(app, ["range", "2024-01-01", "2024-01-31", "--limit", "10"])
    deleted = runner.invoke(app, ["delete", "abc123"])

    assert ranged.exit_code == 0
    assert stub.range_calls == [("2024-01-01", "2024-01-31", 10)]
    assert "range: 2024-01-01 .. 2024-01-31" in ranged.stdout
    assert deleted.exit_code == 0
    assert stub.deleted == ["abc123"]


def test_load_config_reads_environment(monkeypatch) -> None:
    monkeypatch.setenv("API_BASE_URL", "http://example.test:3001/")
    monkeypatch.setenv("CLI_TIMEOUT", "nonsense")

    config = load_config()

    assert config == CLIConfig(base_url="http://example.test:3001", timeout=30.0)


def _client_with(handler) -> ApiClient:
    client = ApiClient(CLIConfig(base_url="http://testserver"))
    client._client = httpx.Client(base_url="http://testserver", transport=httpx.MockTransport(handler))
    return client


def test_api_client_sends_query_parameters() -> None:
    seen: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"message": "No data found", "data": [], "count": 0})

    client = _client_with(handler)
    client.list_readings(limit=3, order="asc")

    (request,) = seen
    assert request.url.path == "/data"
    assert dict(request.url.params) == {"limit": "3", "order": "asc"}


def test_api_client_not_found_is_bad_parameter() -> None:
    client = _client_with(lambda request: httpx.Response(404, json={"error": "Data not found"}))

    with pytest.raises(typer.BadParameter):
        client.get_reading("missing")


def test_api_client_server_error_exits(capsys) -> None:
    client = _client_with(
        lambda request: httpx.Response(
            500, json={"error": "Failed to retrieve data", "message": "backend unavailable"}
        )
    )

    with pytest.raises(typer.Exit):
        client.latest()

    assert "Failed to retrieve data (backend unavailable)" in capsys.readouterr().err
