from __future__ import annotations

from pathlib import Path

import pytest

from balena_core.errors import NotFound, ValidationError
from balena_core.settings import Settings, load_settings


def test_defaults_derive_endpoints(tmp_path: Path):
    settings = load_settings({}, rc_path=tmp_path / "missing.yml")
    assert settings.balena_url == "balena-cloud.com"
    assert settings.api_url == "https://api.balena-cloud.com"
    assert settings.vpn_url == "vpn.balena-cloud.com"
    assert settings.registry_url == "registry2.balena-cloud.com"
    assert settings.delta_url == "https://delta.balena-cloud.com"
    assert settings.root_ca_path is None
    assert settings.debug is False


def test_rc_file_then_environment(tmp_path: Path):
    rc = tmp_path / ".balenarc.yml"
    rc.write_text(
        "balenaUrl: balena.example.com\nproxy: http://proxy:3128\nrequestTimeout: 5\n",
        encoding="utf-8",
    )
    settings = load_settings({}, rc_path=rc)
    assert settings.api_url == "https://api.balena.example.com"
    assert settings.proxy == "http://proxy:3128"
    assert settings.request_timeout == 5.0

    env = {"BALENARC_BALENA_URL": "openbalena.local", "DEBUG": "1"}
    settings = load_settings(env, rc_path=rc)
    assert settings.balena_url == "openbalena.local"
    assert settings.proxy == "http://proxy:3128"
    assert settings.debug is True


def test_token_and_root_ca_from_environment(tmp_path: Path):
    env = {
        "BALENA_API_KEY": "secret",
        "BALENA_EXTRA_CA_CERTS": str(tmp_path / "ca.pem"),
        "BALENARC_DATA_DIRECTORY": str(tmp_path),
    }
    settings = load_settings(env, rc_path=tmp_path / "missing.yml")
    assert settings.token == "secret"
    assert settings.root_ca_path == tmp_path / "ca.pem"
    assert settings.data_directory == tmp_path


def test_token_file_in_data_directory(tmp_path: Path):
    (tmp_path / "token").write_text("from-file\n", encoding="utf-8")
    env = {"BALENARC_DATA_DIRECTORY": str(tmp_path)}
    assert load_settings(env, rc_path=tmp_path / "none.yml").token == "from-file"


def test_debug_unset_or_empty_is_off(tmp_path: Path):
    rc = tmp_path / "none.yml"
    assert load_settings({}, rc_path=rc).debug is False
    assert load_settings({"DEBUG": ""}, rc_path=rc).debug is False


@pytest.mark.parametrize("value", ["1", "0", "false", "yes"])
def test_debug_any_non_empty_value_is_on(tmp_path: Path, value):
    settings = load_settings({"DEBUG": value}, rc_path=tmp_path / "none.yml")
    assert settings.debug is True


def test_rc_file_must_be_mapping(tmp_path: Path):
    rc = tmp_path / ".balenarc.yml"
    rc.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ValidationError):
        load_settings({}, rc_path=rc)


def test_get_uses_sdk_setting_names():
    settings = Settings(balena_url="example.org")
    assert settings.get("apiUrl") == "https://api.example.org"
    assert settings.get("deltaUrl") == "https://delta.example.org"
    with pytest.raises(NotFound):
        settings.get("nope")
