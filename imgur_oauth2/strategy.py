"""
Imgur authentication strategy.

The strategy authenticates requests by delegating to Imgur using the
OAuth 2.0 authorization code flow.

Applications supply a verify callback which receives the access token,
refresh token and the normalized Imgur profile and resolves them to a user
of their own. A falsy user rejects the login.

Example::

    def verify(access_token, refresh_token, profile, done):
        user = User.find_or_create(imgur_id=profile.id)
        done(None, user)

    strategy = ImgurStrategy(
        ImgurOAuth2Config(
            client_id="123-456-789",
            client_secret="shhh-its-a-secret",
            callback_url="https://www.example.net/auth/imgur/callback",
        ),
        verify,
    )
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple

import httpx

from .config import PROVIDER_NAME, ImgurOAuth2Config
from .exceptions import AuthenticationError, AuthenticationFailed
from .oauth2_client import OAuth2Client
from .profile import ImgurProfile, ProfileFetcher
from .verify import invoke_verify, resolve_verify_style

logger = logging.getLogger(__name__)


@dataclass
class AuthenticationResult:
    """Outcome of a successful authentication attempt."""

    user: Any
    info: Any
    profile: Optional[ImgurProfile]
    access_token: str
    refresh_token: Optional[str] = None


class ImgurStrategy:
    """OAuth 2.0 login strategy for Imgur."""

    name = PROVIDER_NAME

    def __init__(
        self,
        config: ImgurOAuth2Config,
        verify: Callable,
        oauth2_client: Optional[OAuth2Client] = None,
        http_client: Optional[httpx.Client] = None,
    ):
        """
        Initialize the strategy.

        Args:
            config: Imgur OAuth2 configuration
            verify: Host callback resolving the Imgur identity to a user
            oauth2_client: Client performing the OAuth2 handshake (built from config if omitted)
            http_client: httpx client used for Imgur API calls
        """
        self.config = config
        self._verify = verify
        self._verify_style = resolve_verify_style(
            verify, pass_request=config.pass_request_to_callback
        )

        if oauth2_client is None:
            oauth2_client = OAuth2Client(
                client_id=config.client_id,
                client_secret=config.client_secret,
                authorization_url=config.authorization_url,
                token_url=config.token_url,
                redirect_uri=config.callback_url,
                scope=config.scope,
                http_client=http_client,
                timeout=config.timeout,
            )
        self._oauth2 = oauth2_client
        self._profile_fetcher = ProfileFetcher(oauth2_client, config.api_base_url)

    def authorization_url(self, state: Optional[str] = None, **params) -> Tuple[str, str]:
        """Return the Imgur authorization URL and the state it carries."""
        return self._oauth2.get_authorization_url(state=state, **params)

    def user_profile(self, access_token: str) -> ImgurProfile:
        """
        Retrieve the user profile from Imgur.

        Raises:
            ProfileFetchError: If the profile cannot be fetched or decoded
        """
        return self._profile_fetcher.fetch(access_token)

    def authenticate(
        self,
        authorization_response: Optional[str] = None,
        state: Optional[str] = None,
        request=None,
        code: Optional[str] = None,
    ) -> AuthenticationResult:
        """
        Complete a login from the provider callback.

        Args:
            authorization_response: Full callback URL received from Imgur
            state: State issued with the authorization request
            request: Current request, passed to the verify callback when enabled
            code: Authorization code, when the callback URL is not available

        Returns:
            The accepted user and what the verify callback reported

        Raises:
            AuthenticationFailed: If the verify callback rejects the user
            AuthenticationError: If the token or the profile cannot be obtained
        """
        token = self._oauth2.exchange_code_for_token(
            authorization_response=authorization_response, code=code, state=state
        )
        access_token = token.get("access_token")
        if not access_token:
            raise AuthenticationError("token response has no access_token")
        refresh_token = token.get("refresh_token")

        profile = None
        if not self.config.skip_user_profile:
            profile = self.user_profile(access_token)

        result = invoke_verify(
            self._verify,
            self._verify_style,
            access_token,
            refresh_token,
            profile,
            params=token,
            request=request,
            pass_request=self.config.pass_request_to_callback,
        )

        if not result.user:
            logger.warning(f"Imgur login rejected by verify callback: {result.info}")
            raise AuthenticationFailed(result.info)

        logger.info(f"Imgur login accepted for account {profile.id if profile else 'unknown'}")
        return AuthenticationResult(
            user=result.user,
            info=result.info,
            profile=profile,
            access_token=access_token,
            refresh_token=refresh_token,
        )
