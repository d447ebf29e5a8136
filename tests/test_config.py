import pytest
from pydantic import ValidationError

import core.config as config
from core.config import AppSettings, write_user_env_vars
from core.domain.models import BodyMode


def test_defaults():
    settings = AppSettings(_env_file=None)
    assert settings.base_url == ""
    assert settings.default_mode is BodyMode.JSON
    assert settings.request_timeout_ms == 30_000


def test_environment_variables_are_read(monkeypatch):
    monkeypatch.setenv("API_CLIENT_BASE_URL", "https://backend.example.com")
    monkeypatch.setenv("API_CLIENT_DEFAULT_MODE", "form")
    monkeypatch.setenv("API_CLIENT_REQUEST_TIMEOUT_MS", "5000")

    settings = AppSettings(_env_file=None)
    assert settings.base_url == "https://backend.example.com"
    assert settings.default_mode is BodyMode.FORM
    assert settings.request_timeout_ms == 5000


def test_project_env_file_is_read(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("API_CLIENT_BASE_URL=http://from-dotenv\n", encoding="utf-8")
    settings = AppSettings(_env_file=str(env_file))
    assert settings.base_url == "http://from-dotenv"


def test_negative_timeout_is_accepted(monkeypatch):
    monkeypatch.setenv("API_CLIENT_REQUEST_TIMEOUT_MS", "-1")
    assert AppSettings(_env_file=None).request_timeout_ms == -1


def test_invalid_values_are_rejected(monkeypatch):
    monkeypatch.setenv("API_CLIENT_DEFAULT_MODE", "xml")
    with pytest.raises(ValidationError):
        AppSettings(_env_file=None)


def test_write_user_env_vars_merges_existing(monkeypatch, tmp_path):
    monkeypatch.setattr(config, "get_user_config_dir", lambda: tmp_path / "cfg")

    write_user_env_vars({"API_CLIENT_BASE_URL": "http://one", "API_CLIENT_DEFAULT_MODE": "json"})
    path = write_user_env_vars({"API_CLIENT_BASE_URL": "http://two"})

    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines[0].startswith("#")
    assert "API_CLIENT_BASE_URL=http://two" in lines
    assert "API_CLIENT_DEFAULT_MODE=json" in lines


def test_user_config_dir_honours_xdg(monkeypatch, tmp_path):
    monkeypatch.setattr(config.sys, "platform", "linux")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    assert config.get_user_config_dir() == tmp_path / "api-client"
