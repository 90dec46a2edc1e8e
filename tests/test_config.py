"""Settings and connection profile loading."""
import pytest

from pdevents import ConfigurationError, Connection
from pdevents.config import DEFAULT_EVENTS_URL, get_settings, load_connection_config
from pdevents.connection import Option


def test_settings_defaults():
    settings = get_settings()
    assert settings.events_url == DEFAULT_EVENTS_URL
    assert settings.verify_ssl is True


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("PAGERDUTY_EVENTS_URL", "https://events.eu.pagerduty.com/v2/enqueue")
    monkeypatch.setenv("PAGERDUTY_CONNECT_TIMEOUT", "3")
    monkeypatch.setenv("PAGERDUTY_USER_AGENT", "monitoring/2.0")
    get_settings.cache_clear()

    conn = Connection()
    assert conn.get_url() == "https://events.eu.pagerduty.com/v2/enqueue"
    assert conn.get_option(Option.CONNECT_TIMEOUT) == 3.0
    assert conn.get_option(Option.USER_AGENT) == "monitoring/2.0"


def test_load_connection_config(tmp_path):
    path = tmp_path / "pagerduty.yaml"
    path.write_text(
        "url: https://events.eu.pagerduty.com/v2/enqueue\n"
        "timeout: 4\n"
        "proxy: http://proxy.internal:3128\n"
        "headers:\n"
        "  X-Team: sre\n"
        "client_cert:\n"
        "  path: /etc/pki/client.pem\n",
        encoding="utf-8",
    )
    config = load_connection_config(path)
    assert config.timeout == 4
    assert config.headers == {"X-Team": "sre"}
    assert config.client_cert.path == "/etc/pki/client.pem"

    conn = Connection.from_config(config)
    assert conn.get_option(Option.PROXY) == "proxy.internal:3128"
    assert conn.get_option(Option.SSL_CERT_PASSWORD) is None


def test_load_empty_config(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert load_connection_config(path).url == ""


def test_load_missing_config(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_connection_config(tmp_path / "missing.yaml")


def test_load_malformed_yaml(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("headers: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_connection_config(path)


def test_load_invalid_values(tmp_path):
    path = tmp_path / "invalid.yaml"
    path.write_text("timeout: soon\n", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_connection_config(path)
