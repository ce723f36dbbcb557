"""Imgur OAuth2 adapter exceptions."""

from typing import Optional


class ImgurOAuth2Error(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(ImgurOAuth2Error):
    """Raised when the strategy is constructed with unusable options."""


class AuthenticationError(ImgurOAuth2Error):
    """Raised when an authentication attempt must be aborted."""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message}: {self.cause}"
        return self.message


class TokenExchangeError(AuthenticationError):
    """Raised when the authorization code cannot be exchanged for a token."""


class ProfileFetchError(AuthenticationError):
    """Raised when the Imgur profile cannot be retrieved."""


class ProfileTransportError(ProfileFetchError):
    """The HTTP call to the Imgur API failed (network error or non-2xx)."""


class ProfileDecodeError(ProfileFetchError):
    """The Imgur API answered with a body that is not the expected JSON."""


class AuthenticationFailed(AuthenticationError):
    """Raised when the verify callback rejects the identity."""

    def __init__(self, info=None):
        super().__init__("verify callback rejected the user")
        self.info = info
