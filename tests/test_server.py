"""Tests for server construction and startup."""

import pytest

from conftest import API_KEY, BASE_URL, make_config, make_service
from dwz_mcp import server as server_module
from dwz_mcp.config import ConfigurationError
from dwz_mcp.server import create_server, load_config


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    for var in ("DWZ_MCP_CONFIG_FILE", "REMOTE_BASE_URL", "REMOTE_API_KEY"):
        monkeypatch.delenv(var, raising=False)
    return tmp_path


class TestLoadConfig:
    """Tests for load_config."""

    def test_valid(self, clean_env, monkeypatch):
        monkeypatch.setenv("REMOTE_BASE_URL", BASE_URL)
        monkeypatch.setenv("REMOTE_API_KEY", API_KEY)
        config = load_config()
        assert config.base_url == BASE_URL

    def test_missing_key_refused(self, clean_env, monkeypatch):
        monkeypatch.setenv("REMOTE_BASE_URL", BASE_URL)
        with pytest.raises(ConfigurationError) as exc_info:
            load_config()
        assert exc_info.value.field == "api_key"


class TestCreateServer:
    """Tests for create_server."""

    @pytest.mark.asyncio
    async def test_registers_all_tools(self, remote):
        mcp = create_server(make_config(), service=make_service(remote))
        names = {tool.name for tool in await mcp.list_tools()}
        assert names == {
            "create_short_url",
            "get_url_info",
            "list_short_urls",
            "delete_short_url",
            "batch_create_short_urls",
            "list_domains",
        }

    def test_uses_configured_name(self, remote):
        mcp = create_server(make_config(server_name="links"), service=make_service(remote))
        assert mcp.name == "links"


class TestMain:
    """Tests for the server entry point."""

    def test_configuration_error_exits(self, clean_env, capsys):
        with pytest.raises(SystemExit) as exc_info:
            server_module.main()
        assert exc_info.value.code == 1
        assert "configuration error" in capsys.readouterr().err
