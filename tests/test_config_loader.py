import pytest

from paylive.connector import PayliveConnector
from paylive.utils.config_loader import (
    ConfigurationError,
    DEFAULT_ENDPOINT_URL,
    load_paylive_settings,
    parse_bool,
    settings_from_env,
)

ENV = {
    "PAYLIVE_API_VERSION": "1.4",
    "PAYLIVE_MERCHANT_EMAIL": "merchant@example.com",
    "PAYLIVE_MERCHANT_KEY": "key-123",
    "PAYLIVE_INTEGRATION_MODE": "True",
}


def test_settings_from_env_defaults_service_type_and_endpoint():
    settings = settings_from_env(ENV)
    assert settings.api_version == "1.4"
    assert settings.service_type == "C2B"
    assert settings.integration_mode is True
    assert settings.endpoint_url == DEFAULT_ENDPOINT_URL
    assert settings.supports_cancellation is False


def test_missing_merchant_key_is_configuration_error():
    env = {k: v for k, v in ENV.items() if k != "PAYLIVE_MERCHANT_KEY"}
    with pytest.raises(ConfigurationError, match=r"merchant_?[Kk]ey"):
        settings_from_env(env)


def test_blank_credential_is_configuration_error():
    with pytest.raises(ConfigurationError):
        settings_from_env({**ENV, "PAYLIVE_MERCHANT_EMAIL": "   "})


@pytest.mark.parametrize("raw", ["yes", "1", "on", "maybe"])
def test_integration_mode_rejects_non_boolean_strings(raw):
    with pytest.raises(ConfigurationError):
        settings_from_env({**ENV, "PAYLIVE_INTEGRATION_MODE": raw})


def test_parse_bool_matches_convert_to_boolean():
    assert parse_bool(" FALSE ", "x") is False
    assert parse_bool("true", "x") is True
    assert parse_bool(True, "x") is True
    with pytest.raises(ConfigurationError):
        parse_bool(1, "x")


def test_yaml_config_with_camel_case_keys(tmp_path):
    path = tmp_path / "paylive.yml"
    path.write_text(
        "paylive:\n"
        "  apiVersion: '1.4'\n"
        "  merchantEmail: merchant@example.com\n"
        "  merchantKey: key-123\n"
        "  serviceType: C2B\n"
        "  integrationMode: 'false'\n",
        encoding="utf-8",
    )
    settings = load_paylive_settings(path)
    assert settings.merchant_email == "merchant@example.com"
    assert settings.integration_mode is False


def test_missing_yaml_file(tmp_path):
    with pytest.raises(ConfigurationError, match="not found"):
        load_paylive_settings(tmp_path / "absent.yml")


def test_yaml_must_be_mapping(tmp_path):
    path = tmp_path / "paylive.yml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_paylive_settings(path)


def test_connector_fails_at_construction_without_configuration(tmp_path, gateway):
    path = tmp_path / "paylive.yml"
    path.write_text("apiVersion: '1.4'\n", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        PayliveConnector(gateway=gateway, config_path=path)
    assert gateway.calls == []


def test_merchant_key_not_in_repr(settings):
    assert "key-123" not in repr(settings)


@pytest.mark.parametrize("key", ["PAYLIVE_INTEGRATION_MODE", "PAYLIVE_SUPPORTS_CANCELLATION"])
def test_blank_boolean_setting_is_configuration_error(key):
    with pytest.raises(ConfigurationError):
        settings_from_env({**ENV, key: ""})


def test_blank_optional_string_setting_falls_back_to_default():
    settings = settings_from_env({**ENV, "PAYLIVE_ENDPOINT_URL": ""})
    assert settings.endpoint_url == DEFAULT_ENDPOINT_URL
