"""
Imgur profile retrieval.

A profile is built from two authenticated calls to the Imgur API: the
account record (``/account/me/``) and the account settings
(``/account/me/settings``). Both are merged into one flat ``ImgurProfile``.
"""

import json
import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Optional

import httpx

from .config import DEFAULT_API_BASE_URL, PROVIDER_NAME
from .exceptions import ProfileDecodeError, ProfileTransportError
from .oauth2_client import OAuth2Client

logger = logging.getLogger(__name__)

ACCOUNT_FIELDS = ("id", "url", "bio", "reputation", "pro_expiration", "created")

SETTINGS_FIELDS = (
    "email",
    "high_quality",
    "public_images",
    "album_privacy",
    "pro_expiration",
    "accepted_gallery_terms",
    "active_emails",
    "messaging_enabled",
    "blocked_users",
    "show_mature",
)


@dataclass
class ImgurProfile:
    """
    Normalized Imgur user profile.

    ``provider`` is always ``"imgur"``. Fields missing from the API
    responses are left as ``None``.
    """

    provider: str = field(default=PROVIDER_NAME, init=False)

    # /account/me/
    id: Any = None
    url: Optional[str] = None
    bio: Optional[str] = None
    reputation: Any = None
    pro_expiration: Any = None
    created: Any = None

    # /account/me/settings
    email: Optional[str] = None
    high_quality: Any = None
    public_images: Any = None
    album_privacy: Optional[str] = None
    accepted_gallery_terms: Any = None
    active_emails: Any = None
    messaging_enabled: Any = None
    blocked_users: Any = None
    show_mature: Any = None

    def to_dict(self) -> dict:
        return asdict(self)


class ProfileFetcher:
    """Fetch and normalize the profile of the access token's owner."""

    def __init__(self, oauth2_client: OAuth2Client, api_base_url: str = DEFAULT_API_BASE_URL):
        self.oauth2_client = oauth2_client
        self.api_base_url = api_base_url.rstrip("/")

    @property
    def account_url(self) -> str:
        return f"{self.api_base_url}/account/me/"

    @property
    def settings_url(self) -> str:
        return f"{self.api_base_url}/account/me/settings"

    def fetch(self, access_token: str) -> ImgurProfile:
        """
        Retrieve the user profile from Imgur.

        Args:
            access_token: OAuth access token

        Returns:
            The merged profile

        Raises:
            ProfileTransportError: If either API call fails
            ProfileDecodeError: If either response is not the expected JSON
        """
        # The client sends tokens as a query parameter unless told otherwise
        self.oauth2_client.use_authorization_header_for_get(True)

        profile = ImgurProfile()

        account = self._get_data(self.account_url, access_token)
        self._copy_fields(account, profile, ACCOUNT_FIELDS)

        settings = self._get_data(self.settings_url, access_token)
        self._copy_fields(settings, profile, SETTINGS_FIELDS)

        logger.info(f"Fetched Imgur profile for account {profile.id}")
        return profile

    def _get_data(self, url: str, access_token: str) -> dict:
        # Malformed URLs fail with InvalidURL or ValueError before anything is sent
        try:
            body = self.oauth2_client.authenticated_get(url, access_token)
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
            logger.error(f"Imgur API request failed: {url}: {e}")
            raise ProfileTransportError("failed to fetch user profile", e) from e

        try:
            payload = json.loads(body)
        except ValueError as e:
            logger.error(f"Imgur API returned invalid JSON: {url}")
            raise ProfileDecodeError("failed to parse user profile", e) from e

        data = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(data, dict):
            logger.error(f"Imgur API response has no data object: {url}")
            raise ProfileDecodeError("user profile response has no data object")

        logger.debug(f"Imgur API response from {url}: {sorted(data)}")
        return data

    @staticmethod
    def _copy_fields(data: dict, profile: ImgurProfile, fields) -> None:
        for name in fields:
            setattr(profile, name, data.get(name))
