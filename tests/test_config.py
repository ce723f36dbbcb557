import dataclasses

import pytest

from imgur_oauth2 import ConfigurationError, ImgurOAuth2Config, ImgurPluginConfig
from imgur_oauth2.config import (
    DEFAULT_API_BASE_URL,
    DEFAULT_AUTHORIZATION_URL,
    DEFAULT_TOKEN_URL,
)

from .conftest import CALLBACK_URL

REQUIRED = {
    "client_id": "client-123456789",
    "client_secret": "shhh-its-a-secret",
    "callback_url": CALLBACK_URL,
}


def test_defaults():
    config = ImgurOAuth2Config(**REQUIRED)

    assert config.authorization_url == "https://api.imgur.com/oauth2/authorize"
    assert config.token_url == "https://api.imgur.com/oauth2/token"
    assert config.api_base_url == "https://api.imgur.com/3"
    assert config.scope is None
    assert config.skip_user_profile is False
    assert config.pass_request_to_callback is False


def test_endpoint_overrides():
    config = ImgurOAuth2Config(
        **REQUIRED,
        authorization_url="https://imgur.test/authorize",
        token_url="https://imgur.test/token",
    )

    assert config.authorization_url == "https://imgur.test/authorize"
    assert config.token_url == "https://imgur.test/token"


def test_empty_endpoint_overrides_fall_back_to_defaults():
    config = ImgurOAuth2Config(**REQUIRED, authorization_url="", token_url="", api_base_url="")

    assert config.authorization_url == DEFAULT_AUTHORIZATION_URL
    assert config.token_url == DEFAULT_TOKEN_URL
    assert config.api_base_url == DEFAULT_API_BASE_URL


@pytest.mark.parametrize("missing", ["client_id", "client_secret", "callback_url"])
def test_required_options(missing):
    options = {**REQUIRED, missing: ""}

    with pytest.raises(ConfigurationError, match=missing):
        ImgurOAuth2Config(**options)


def test_config_is_immutable():
    config = ImgurOAuth2Config(**REQUIRED)

    with pytest.raises(dataclasses.FrozenInstanceError):
        config.token_url = "https://evil.test/token"


def test_from_mapping():
    config = ImgurOAuth2Config.from_mapping({
        "IMGUR_CLIENT_ID": "client-123456789",
        "IMGUR_CLIENT_SECRET": "shhh-its-a-secret",
        "IMGUR_CALLBACK_URL": CALLBACK_URL,
        "IMGUR_SCOPE": "read",
        "IMGUR_SKIP_USER_PROFILE": "True",
        "IMGUR_PASS_REQUEST_TO_CALLBACK": "no",
        "IMGUR_TIMEOUT": "2.5",
    })

    assert config.client_id == "client-123456789"
    assert config.authorization_url == DEFAULT_AUTHORIZATION_URL
    assert config.scope == "read"
    assert config.skip_user_profile is True
    assert config.pass_request_to_callback is False
    assert config.timeout == 2.5


def test_from_env(monkeypatch):
    monkeypatch.setenv("IMGUR_CLIENT_ID", "env-client")
    monkeypatch.setenv("IMGUR_CLIENT_SECRET", "env-secret")
    monkeypatch.setenv("IMGUR_CALLBACK_URL", CALLBACK_URL)
    monkeypatch.setenv("IMGUR_TOKEN_URL", "https://imgur.test/token")

    config = ImgurOAuth2Config.from_env()

    assert config.client_id == "env-client"
    assert config.token_url == "https://imgur.test/token"


def test_from_env_without_credentials(monkeypatch):
    for key in ("IMGUR_CLIENT_ID", "IMGUR_CLIENT_SECRET", "IMGUR_CALLBACK_URL"):
        monkeypatch.delenv(key, raising=False)

    with pytest.raises(ConfigurationError):
        ImgurOAuth2Config.from_env()


def test_describe_masks_secrets():
    described = ImgurOAuth2Config(**REQUIRED).describe()

    assert described["provider"] == "imgur"
    assert described["client_id"] == "client-1..."
    assert "shhh" not in str(described)


def test_plugin_config_from_mapping():
    config = ImgurPluginConfig.from_mapping({
        "IMGUR_CLIENT_ID": "client-123456789",
        "IMGUR_CLIENT_SECRET": "shhh-its-a-secret",
        "IMGUR_CALLBACK_URL": CALLBACK_URL,
        "IMGUR_LOGIN_SUCCESS_REDIRECT": "/dashboard",
    })

    assert config.oauth2.client_id == "client-123456789"
    assert config.url_prefix == "/auth/imgur"
    assert config.login_success_redirect == "/dashboard"
    assert config.login_error_redirect == "/login?error=auth_failed"
