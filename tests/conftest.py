import json

import httpx
import pytest
from flask import Flask

from imgur_oauth2 import ImgurAuth, ImgurOAuth2Config
from imgur_oauth2.oauth2_client import OAuth2Client

ACCOUNT_URL = "https://api.imgur.com/3/account/me/"
SETTINGS_URL = "https://api.imgur.com/3/account/me/settings"
CALLBACK_URL = "https://app.example.com/auth/imgur/callback"

ACCOUNT_BODY = {
    "data": {
        "id": "123",
        "url": "jdoe",
        "bio": "hi",
        "reputation": 10,
        "pro_expiration": False,
        "created": 1000,
    },
    "success": True,
    "status": 200,
}

SETTINGS_BODY = {
    "data": {
        "email": "a@b.com",
        "high_quality": False,
        "public_images": True,
        "album_privacy": "secret",
        "pro_expiration": True,
        "accepted_gallery_terms": True,
        "active_emails": ["a@b.com"],
        "messaging_enabled": True,
        "blocked_users": [],
        "show_mature": False,
    },
    "success": True,
    "status": 200,
}

TOKEN_RESPONSE = {
    "access_token": "access-abc",
    "refresh_token": "refresh-def",
    "token_type": "bearer",
    "expires_in": 315360000,
    "account_username": "jdoe",
}


class FakeImgurApi:
    """
    Stand-in for the Imgur REST API behind an httpx.MockTransport.

    ``routes`` maps a URL (without query) to a ``(status, body)`` pair or to
    an exception class raised as a transport failure. Dict bodies are sent
    as JSON, strings as they are.
    """

    def __init__(self, routes=None):
        self.requests = []
        self.routes = {
            ACCOUNT_URL: (200, ACCOUNT_BODY),
            SETTINGS_URL: (200, SETTINGS_BODY),
        }
        if routes:
            self.routes.update(routes)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = f"{request.url.scheme}://{request.url.host}{request.url.path}"
        route = self.routes.get(url)

        if route is None:
            return httpx.Response(404, json={"data": {"error": "not found"}})
        if isinstance(route, type) and issubclass(route, Exception):
            raise route("connection refused", request=request)

        status, body = route
        if isinstance(body, str):
            return httpx.Response(status, text=body)
        return httpx.Response(status, text=json.dumps(body))

    @property
    def urls(self):
        return [
            f"{r.url.scheme}://{r.url.host}{r.url.path}" for r in self.requests
        ]


@pytest.fixture
def imgur_api():
    return FakeImgurApi()


@pytest.fixture
def http_client(imgur_api):
    client = httpx.Client(transport=httpx.MockTransport(imgur_api))
    yield client
    client.close()


@pytest.fixture
def config():
    return ImgurOAuth2Config(
        client_id="client-123456789",
        client_secret="shhh-its-a-secret",
        callback_url=CALLBACK_URL,
    )


@pytest.fixture
def oauth2_client(config, http_client):
    return OAuth2Client(
        client_id=config.client_id,
        client_secret=config.client_secret,
        authorization_url=config.authorization_url,
        token_url=config.token_url,
        redirect_uri=config.callback_url,
        http_client=http_client,
    )


class FakeOAuth2Client(OAuth2Client):
    """OAuth2 client whose code exchange returns a canned token response."""

    def __init__(self, *args, token=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.token = dict(TOKEN_RESPONSE if token is None else token)
        self.exchanges = []

    def exchange_code_for_token(self, authorization_response=None, code=None, state=None):
        self.exchanges.append(
            {"authorization_response": authorization_response, "code": code, "state": state}
        )
        return dict(self.token)


@pytest.fixture
def fake_oauth2_client(config, http_client):
    return FakeOAuth2Client(
        client_id=config.client_id,
        client_secret=config.client_secret,
        authorization_url=config.authorization_url,
        token_url=config.token_url,
        redirect_uri=config.callback_url,
        http_client=http_client,
    )


@pytest.fixture
def fake_token_exchange(monkeypatch):
    """Replace authlib's network token exchange with a canned response."""
    calls = []

    def fetch_token(self, url=None, **kwargs):
        calls.append({"url": url, "state": self.state, **kwargs})
        return dict(TOKEN_RESPONSE)

    monkeypatch.setattr(
        "authlib.integrations.requests_client.OAuth2Session.fetch_token", fetch_token
    )
    return calls


@pytest.fixture
def verified_users():
    return []


@pytest.fixture
def app(http_client, verified_users, monkeypatch):
    for key in ("IMGUR_CLIENT_ID", "IMGUR_CLIENT_SECRET", "IMGUR_CALLBACK_URL"):
        monkeypatch.delenv(key, raising=False)

    app = Flask(__name__)
    app.config.update(
        TESTING=True,
        SECRET_KEY="test-secret",
        IMGUR_CLIENT_ID="client-123456789",
        IMGUR_CLIENT_SECRET="shhh-its-a-secret",
        IMGUR_CALLBACK_URL=CALLBACK_URL,
    )

    def verify(access_token, refresh_token, profile, done):
        verified_users.append(profile)
        if profile.url == "banned":
            return done(None, False, {"message": "banned"})
        done(None, {"id": profile.id, "username": profile.url})

    ImgurAuth(app, verify=verify, http_client=http_client)
    return app


@pytest.fixture
def client(app):
    return app.test_client()
