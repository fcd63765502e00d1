"""
Tests for the stayhub command line
"""

import pytest
from click.testing import CliRunner

from stayhub import cli as cli_module
from stayhub.cli import cli
from stayhub.remote import RemoteSchemaClient

REMOTE_SDL = """
type Query { allRestaurants: [Restaurant!]! }
type Restaurant { id: ID! title: String! }
"""


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def uvicorn_calls(monkeypatch):
    calls = []
    monkeypatch.setattr(cli_module.uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))
    return calls


@pytest.fixture
def env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("STAYHUB_BACKEND_SERVICE_ID", "svc")
    monkeypatch.setenv("STAYHUB_BACKEND_TOKEN", "tok")


def test_serve_without_configuration_exits(runner, uvicorn_calls, monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("STAYHUB_BACKEND_SERVICE_ID", raising=False)
    monkeypatch.delenv("STAYHUB_BACKEND_TOKEN", raising=False)

    result = runner.invoke(cli, ["serve"])

    assert result.exit_code == 1
    assert "STAYHUB_BACKEND_SERVICE_ID" in result.output
    assert uvicorn_calls == []


def test_serve_uses_configured_port(runner, uvicorn_calls, env):
    result = runner.invoke(cli, ["serve"])

    assert result.exit_code == 0, result.output
    ((app, kwargs),) = uvicorn_calls
    assert kwargs["port"] == 4000
    assert kwargs["host"] == "0.0.0.0"
    assert kwargs["lifespan"] == "on"
    assert app.state.settings.backend_service_id == "svc"


def test_serve_with_reload_uses_app_factory(runner, uvicorn_calls, env):
    result = runner.invoke(cli, ["serve", "--reload", "--port", "5000"])

    assert result.exit_code == 0, result.output
    ((app, kwargs),) = uvicorn_calls
    assert app == "stayhub.api.app:create_app"
    assert kwargs["factory"] is True
    assert kwargs["port"] == 5000


def test_compose_schema_writes_file(runner, env, monkeypatch, tmp_path):
    async def fake_fetch(self):
        return REMOTE_SDL

    monkeypatch.setattr(RemoteSchemaClient, "fetch_type_defs", fake_fetch)
    output = tmp_path / "out" / "schema.graphql"

    result = runner.invoke(cli, ["compose-schema", "--output", str(output)])

    assert result.exit_code == 0, result.output
    assert "Schema written" in result.output
    written = output.read_text(encoding="utf-8")
    assert "type Restaurant" in written
    assert "type Viewer" in written


def test_compose_schema_reports_fetch_failure(runner, env, monkeypatch):
    from stayhub.errors import RemoteSchemaError

    async def failing_fetch(self):
        raise RemoteSchemaError("Failed to fetch remote schema")

    monkeypatch.setattr(RemoteSchemaClient, "fetch_type_defs", failing_fetch)

    result = runner.invoke(cli, ["compose-schema"])

    assert result.exit_code == 1
    assert "Failed to fetch remote schema" in result.output
