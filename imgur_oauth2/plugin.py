"""
Flask extension wiring the Imgur strategy into an application.

Usage::

    imgur = ImgurAuth(app, verify=find_or_create_user)

Configuration is read from ``IMGUR_*`` keys of ``app.config``, falling
back to environment variables of the same name.
"""

import logging
import os
from collections import ChainMap
from typing import Callable, Optional

import httpx
from flask import Flask, session
from flask.sessions import session_json_serializer

from .blueprint import EXTENSION_KEY, SESSION_USER_KEY, imgur_bp
from .cli import imgur_cli
from .config import PROVIDER_NAME, ImgurPluginConfig
from .strategy import AuthenticationResult, ImgurStrategy

logger = logging.getLogger(__name__)


def store_user_in_session(result: AuthenticationResult) -> None:
    """
    Default login hook: keep the verified user in the Flask session.

    Users the session cookie cannot hold (model instances and the like) are
    replaced by the Imgur identity. Pass ``on_login`` to store something else.
    """
    try:
        session_json_serializer.dumps(result.user)
    except TypeError:
        logger.warning(
            f"User of type {type(result.user).__name__} cannot be stored in the "
            f"session; storing the Imgur account id instead"
        )
        session[SESSION_USER_KEY] = {
            "provider": PROVIDER_NAME,
            "id": result.profile.id if result.profile else None,
        }
        return

    session[SESSION_USER_KEY] = result.user


class ImgurAuth:
    """
    Imgur login extension for Flask.

    Registers the login blueprint and the ``flask imgur`` CLI group.
    """

    def __init__(
        self,
        app: Optional[Flask] = None,
        verify: Optional[Callable] = None,
        on_login: Optional[Callable[[AuthenticationResult], None]] = None,
        http_client: Optional[httpx.Client] = None,
    ):
        """
        Initialize the extension.

        Args:
            app: Flask application instance (optional, can call init_app later)
            verify: Host callback resolving the Imgur identity to a user
            on_login: Called with the AuthenticationResult after a successful login
            http_client: httpx client used for Imgur API calls
        """
        self.app = app
        self.verify = verify
        self.on_login = on_login or store_user_in_session
        self.http_client = http_client
        self.config: Optional[ImgurPluginConfig] = None
        self.strategy: Optional[ImgurStrategy] = None

        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask, verify: Optional[Callable] = None):
        """
        Initialize the extension with a Flask application.

        Raises:
            ConfigurationError: If client credentials or the verify callback are missing
        """
        self.app = app
        if verify is not None:
            self.verify = verify

        # app.config overrides the environment
        self.config = ImgurPluginConfig.from_mapping(ChainMap(app.config, os.environ))
        self.strategy = ImgurStrategy(
            self.config.oauth2, self.verify, http_client=self.http_client
        )

        if not app.config.get("SECRET_KEY"):
            logger.warning(
                "Flask SECRET_KEY not set. The login state cannot be kept in the session."
            )

        app.extensions[EXTENSION_KEY] = self
        app.register_blueprint(imgur_bp, url_prefix=self.config.url_prefix)
        app.cli.add_command(imgur_cli)

        logger.info("Imgur OAuth2 extension initialized")
        logger.info(f"Authorization URL: {self.config.oauth2.authorization_url}")
