"""
Configuration management for the Imgur OAuth2 strategy.

This module holds the fixed Imgur endpoints and loads the strategy and
plugin configuration from keyword arguments, the environment or a Flask
``app.config`` mapping.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .exceptions import ConfigurationError

PROVIDER_NAME = "imgur"

DEFAULT_AUTHORIZATION_URL = "https://api.imgur.com/oauth2/authorize"
DEFAULT_TOKEN_URL = "https://api.imgur.com/oauth2/token"
DEFAULT_API_BASE_URL = "https://api.imgur.com/3"

ENV_PREFIX = "IMGUR_"


def _as_bool(value, default: bool = False) -> bool:
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class ImgurOAuth2Config:
    """Imgur OAuth2 provider configuration."""

    # Client credentials
    client_id: str
    client_secret: str
    callback_url: str

    # OAuth2 endpoints
    authorization_url: str = DEFAULT_AUTHORIZATION_URL
    token_url: str = DEFAULT_TOKEN_URL

    # Base of the REST API used for profile retrieval
    api_base_url: str = DEFAULT_API_BASE_URL

    scope: Optional[str] = None
    skip_user_profile: bool = False
    pass_request_to_callback: bool = False
    timeout: float = 10.0

    def __post_init__(self):
        missing = [
            name
            for name in ("client_id", "client_secret", "callback_url")
            if not getattr(self, name)
        ]
        if missing:
            raise ConfigurationError(
                f"Imgur OAuth2 strategy requires: {', '.join(missing)}"
            )

        # Empty overrides fall back to the provider endpoints
        if not self.authorization_url:
            object.__setattr__(self, "authorization_url", DEFAULT_AUTHORIZATION_URL)
        if not self.token_url:
            object.__setattr__(self, "token_url", DEFAULT_TOKEN_URL)
        if not self.api_base_url:
            object.__setattr__(self, "api_base_url", DEFAULT_API_BASE_URL)

    @classmethod
    def from_mapping(
        cls, mapping: Mapping, prefix: str = ENV_PREFIX
    ) -> "ImgurOAuth2Config":
        """Create configuration from ``IMGUR_*`` keys of a mapping."""
        timeout = mapping.get(f"{prefix}TIMEOUT")

        return cls(
            client_id=mapping.get(f"{prefix}CLIENT_ID", ""),
            client_secret=mapping.get(f"{prefix}CLIENT_SECRET", ""),
            callback_url=mapping.get(f"{prefix}CALLBACK_URL", ""),
            authorization_url=mapping.get(f"{prefix}AUTHORIZATION_URL", ""),
            token_url=mapping.get(f"{prefix}TOKEN_URL", ""),
            api_base_url=mapping.get(f"{prefix}API_BASE_URL", ""),
            scope=mapping.get(f"{prefix}SCOPE") or None,
            skip_user_profile=_as_bool(mapping.get(f"{prefix}SKIP_USER_PROFILE")),
            pass_request_to_callback=_as_bool(
                mapping.get(f"{prefix}PASS_REQUEST_TO_CALLBACK")
            ),
            timeout=float(timeout) if timeout else 10.0,
        )

    @classmethod
    def from_env(cls) -> "ImgurOAuth2Config":
        """Create configuration from environment variables."""
        return cls.from_mapping(os.environ)

    def describe(self) -> dict:
        """Return a printable view of the configuration with secrets masked."""
        return {
            "provider": PROVIDER_NAME,
            "client_id": self.client_id[:8] + "...",
            "client_secret": "Configured",
            "callback_url": self.callback_url,
            "authorization_url": self.authorization_url,
            "token_url": self.token_url,
            "api_base_url": self.api_base_url,
            "scope": self.scope or "Not configured",
            "skip_user_profile": self.skip_user_profile,
            "pass_request_to_callback": self.pass_request_to_callback,
            "timeout": self.timeout,
        }


@dataclass
class ImgurPluginConfig:
    """Configuration of the Flask integration."""

    oauth2: ImgurOAuth2Config

    url_prefix: str = "/auth/imgur"

    # Frontend redirect settings
    frontend_url: str = "/"
    login_success_redirect: str = "/"
    login_error_redirect: str = "/login?error=auth_failed"

    @classmethod
    def from_mapping(
        cls, mapping: Mapping, prefix: str = ENV_PREFIX
    ) -> "ImgurPluginConfig":
        """Create configuration from ``IMGUR_*`` keys of a mapping."""
        return cls(
            oauth2=ImgurOAuth2Config.from_mapping(mapping, prefix=prefix),
            url_prefix=mapping.get(f"{prefix}URL_PREFIX", "/auth/imgur"),
            frontend_url=mapping.get(f"{prefix}FRONTEND_URL", "/"),
            login_success_redirect=mapping.get(
                f"{prefix}LOGIN_SUCCESS_REDIRECT", "/"
            ),
            login_error_redirect=mapping.get(
                f"{prefix}LOGIN_ERROR_REDIRECT", "/login?error=auth_failed"
            ),
        )

    @classmethod
    def from_env(cls) -> "ImgurPluginConfig":
        """Create configuration from environment variables."""
        return cls.from_mapping(os.environ)
