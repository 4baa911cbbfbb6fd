"""Unit tests for typed configuration dataclasses."""

import pytest

from moviemeter.config_types import AppConfig, ConfigError, DebounceConfig, EndpointConfig


def test_endpoint_config_defaults():
    config = EndpointConfig()

    assert config.base_url == "http://127.0.0.1:3000"
    assert config.timeout_seconds == 30.0


def test_debounce_config_defaults():
    assert DebounceConfig().delay_ms == 500


def test_app_config_to_dict():
    config = AppConfig(debounce=DebounceConfig(delay_ms=250))

    data = config.to_dict()

    assert data["log_level"] == "INFO"
    assert data["debounce"] == {"delay_ms": 250}
    assert data["endpoint"]["base_url"] == "http://127.0.0.1:3000"


def test_app_config_from_dict_partial():
    config = AppConfig.from_dict({"endpoint": {"base_url": "http://x.test"}})

    assert config.endpoint.base_url == "http://x.test"
    assert config.endpoint.timeout_seconds == 30.0
    assert config.debounce.delay_ms == 500


def test_round_trip():
    original = AppConfig(log_level="DEBUG", endpoint=EndpointConfig(base_url="http://y.test", timeout_seconds=3))
    assert AppConfig.from_dict(original.to_dict()) == original


@pytest.mark.parametrize("data,message", [
    ({"log_level": "chatty"}, "log_level"),
    ({"endpoint": {"base_url": "ftp://x.test"}}, "base_url"),
    ({"endpoint": {"timeout_seconds": 0}}, "timeout_seconds"),
    ({"endpoint": {"timeout_seconds": "30"}}, "timeout_seconds"),
    ({"debounce": {"delay_ms": 2.5}}, "delay_ms"),
    ({"debounce": {"delay_ms": True}}, "delay_ms"),
])
def test_from_dict_validates_values(data, message):
    with pytest.raises(ConfigError, match=message):
        AppConfig.from_dict(data)


def test_from_dict_normalizes_log_level():
    assert AppConfig.from_dict({"log_level": "warning"}).log_level == "WARNING"
