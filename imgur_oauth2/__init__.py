"""
imgur-oauth2

Imgur login for Flask applications via the OAuth 2.0 authorization code
flow.

This package provides:
- An Imgur authentication strategy with a host-supplied verify callback
- Retrieval of the Imgur account and settings into one normalized profile
- A Flask blueprint with login, callback and logout endpoints
- Flask CLI commands for checking the configuration
"""

__version__ = "0.1.0"

from .config import ImgurOAuth2Config, ImgurPluginConfig
from .exceptions import (
    AuthenticationError,
    AuthenticationFailed,
    ConfigurationError,
    ImgurOAuth2Error,
    ProfileDecodeError,
    ProfileFetchError,
    ProfileTransportError,
    TokenExchangeError,
)
from .plugin import ImgurAuth
from .profile import ImgurProfile, ProfileFetcher
from .strategy import AuthenticationResult, ImgurStrategy

__all__ = [
    "AuthenticationError",
    "AuthenticationFailed",
    "AuthenticationResult",
    "ConfigurationError",
    "ImgurAuth",
    "ImgurOAuth2Config",
    "ImgurOAuth2Error",
    "ImgurPluginConfig",
    "ImgurProfile",
    "ImgurStrategy",
    "ProfileDecodeError",
    "ProfileFetchError",
    "ProfileFetcher",
    "ProfileTransportError",
    "TokenExchangeError",
    "__version__",
]
