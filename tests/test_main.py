"""Tests for the command-line entry point and configuration."""

import asyncio

import pytest

from consola_admin import main as main_module
from consola_admin.core.config import DEFAULT_API_URL, DEFAULT_TIMEOUT, APIConfig
from consola_admin.core.errors import ServerError


class TestAPIConfig:
    """Tests for APIConfig."""

    def test_defaults(self):
        config = APIConfig.from_env({})
        assert config.base_url == DEFAULT_API_URL
        assert config.timeout == DEFAULT_TIMEOUT

    def test_from_env(self):
        config = APIConfig.from_env(
            {"CONSOLA_API_URL": "http://svc:9000/", "CONSOLA_API_TIMEOUT": "2.5"}
        )
        assert config.base_url == "http://svc:9000"
        assert config.timeout == 2.5
        assert config.url("/users/") == "http://svc:9000/users/"

    def test_invalid_timeout(self):
        with pytest.raises(ValueError):
            APIConfig.from_env({"CONSOLA_API_TIMEOUT": "rápido"})
        with pytest.raises(ValueError):
            APIConfig(timeout=0)


class TestCommandLine:
    """Tests for build_config / run / main."""

    def test_build_config_overrides_env(self, monkeypatch):
        monkeypatch.setenv("CONSOLA_API_URL", "http://env:1")
        args = main_module.build_parser().parse_args(
            ["--api-url", "http://cli:2", "--timeout", "4"]
        )
        config = main_module.build_config(args)
        assert config == APIConfig(base_url="http://cli:2", timeout=4)

    def test_run_prints_summary(self, console, capsys):
        code = asyncio.run(main_module.run(console, recent=2, export_dir=None))

        output = capsys.readouterr().out
        assert code == 0
        assert "Usuarios:               2" in output
        assert "Bernoulli | Ada" in output

    def test_run_exports(self, console, tmp_path):
        code = asyncio.run(main_module.run(console, recent=5, export_dir=tmp_path / "out"))
        assert code == 0
        for name in ("usuarios.csv", "publicaciones.csv", "dashboard.json"):
            assert (tmp_path / "out" / name).exists()

    def test_run_service_down(self, console, fake_api):
        fake_api.online = False
        assert asyncio.run(main_module.run(console, recent=5, export_dir=None)) == 1
        assert "list_users" not in fake_api.calls

    def test_run_refresh_failure(self, console, fake_api):
        fake_api.fail_with = ServerError("http://api.test/users/", 500)
        assert asyncio.run(main_module.run(console, recent=5, export_dir=None)) == 1

    def test_main_with_invalid_timeout(self):
        assert main_module.main(["--timeout", "-1"]) == 2
