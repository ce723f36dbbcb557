"""
OAuth2 client used by the Imgur strategy.

The authorization-code handshake (authorization URL, state check, code
exchange) is handled by authlib. Authenticated API calls are plain httpx
requests carrying the access token either as a query parameter or in the
``Authorization`` header.
"""

import logging
from typing import Optional, Tuple

import httpx
import requests
from authlib.common.errors import AuthlibBaseError
from authlib.integrations.requests_client import OAuth2Session

from .exceptions import TokenExchangeError

logger = logging.getLogger(__name__)


class OAuth2Client:
    """Authorization-code client bound to one set of client credentials."""

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        authorization_url: str,
        token_url: str,
        redirect_uri: str,
        scope: Optional[str] = None,
        http_client: Optional[httpx.Client] = None,
        timeout: float = 10.0,
    ):
        """
        Initialize the OAuth2 client.

        Args:
            client_id: OAuth client ID issued by the provider
            client_secret: OAuth client secret issued by the provider
            authorization_url: Provider's authorization endpoint
            token_url: Provider's token endpoint
            redirect_uri: Callback URL registered with the provider
            scope: Optional scope requested during authorization
            http_client: httpx client for API calls (one is created per call if omitted)
            timeout: Timeout in seconds for API calls
        """
        self.client_id = client_id
        self.client_secret = client_secret
        self.authorization_url = authorization_url
        self.token_url = token_url
        self.redirect_uri = redirect_uri
        self.scope = scope
        self.timeout = timeout
        self._http_client = http_client
        self._use_authorization_header = False

    def create_session(self, state: Optional[str] = None) -> OAuth2Session:
        """Create an authlib OAuth2 session for the configured provider."""
        return OAuth2Session(
            client_id=self.client_id,
            client_secret=self.client_secret,
            redirect_uri=self.redirect_uri,
            scope=self.scope,
            state=state,
        )

    def get_authorization_url(
        self, state: Optional[str] = None, **params
    ) -> Tuple[str, str]:
        """
        Build the URL the user agent is redirected to.

        Args:
            state: CSRF state, generated by authlib when omitted
            **params: Extra query parameters for the authorization request

        Returns:
            Tuple of (authorization URL, state)
        """
        session = self.create_session()
        return session.create_authorization_url(
            self.authorization_url, state=state, **params
        )

    def exchange_code_for_token(
        self,
        authorization_response: Optional[str] = None,
        code: Optional[str] = None,
        state: Optional[str] = None,
    ) -> dict:
        """
        Exchange an authorization code for an access token.

        Args:
            authorization_response: Full callback URL received from the provider
            code: Authorization code, when the callback URL is not available
            state: Expected state, checked against the callback URL

        Returns:
            Token response with access_token, refresh_token, etc.

        Raises:
            TokenExchangeError: If the exchange fails
        """
        session = self.create_session(state=state)
        kwargs = {}
        if authorization_response:
            kwargs["authorization_response"] = authorization_response
        if code:
            kwargs["code"] = code

        logger.info(f"Token exchange attempt | client_id={self.client_id} "
                    f"redirect_uri={self.redirect_uri}")

        try:
            token = session.fetch_token(self.token_url, **kwargs)
        except (AuthlibBaseError, requests.RequestException) as e:
            logger.error(f"Token exchange failed: {e}")
            raise TokenExchangeError("failed to obtain access token", e) from e

        logger.info("Token exchange SUCCESS")
        return dict(token)

    def use_authorization_header_for_get(self, enabled: bool) -> None:
        """Send the access token in the Authorization header instead of the query."""
        self._use_authorization_header = enabled

    def authenticated_get(self, url: str, access_token: str) -> str:
        """
        Issue a GET request on behalf of the token owner.

        Args:
            url: Absolute URL to fetch
            access_token: OAuth access token

        Returns:
            Raw response body

        Raises:
            httpx.HTTPError: On network failure or non-2xx response
        """
        headers = {}
        params = {}
        if self._use_authorization_header:
            headers["Authorization"] = f"Bearer {access_token}"
        else:
            params["access_token"] = access_token

        if self._http_client is not None:
            response = self._http_client.get(url, headers=headers, params=params)
        else:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.get(url, headers=headers, params=params)

        response.raise_for_status()
        logger.debug(f"GET {url} -> {response.status_code}")
        return response.text
