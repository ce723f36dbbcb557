"""
Flask blueprint for Imgur login.

This blueprint provides the following endpoints:
- GET /login - Redirect the user to Imgur for authorization
- GET /callback - Imgur callback (receives the authorization code)
- GET /logout - Clear the login from the session
- GET /info - Describe the configured provider
"""

import logging
import secrets
from typing import Optional
from urllib.parse import urlparse

from flask import (
    current_app,
    jsonify,
    redirect,
    request,
    session,
    url_for,
)
from flask_smorest import Blueprint

from .exceptions import AuthenticationError, AuthenticationFailed

logger = logging.getLogger(__name__)

EXTENSION_KEY = "imgur_oauth2"

SESSION_STATE_KEY = "imgur_oauth2_state"
SESSION_RETURN_KEY = "imgur_auth_return_url"
SESSION_USER_KEY = "imgur_user"

imgur_bp = Blueprint(
    "imgur_auth",
    __name__,
    url_prefix="/auth/imgur",
    description="Imgur OAuth2 login endpoints"
)


def is_safe_redirect(url: Optional[str]) -> bool:
    """Accept only same-site paths such as ``/dashboard``."""
    if not url or not url.startswith("/") or url.startswith("//") or "\\" in url:
        return False
    parsed = urlparse(url)
    return not parsed.scheme and not parsed.netloc


def get_extension():
    """Return the ImgurAuth extension registered on the current app."""
    return current_app.extensions[EXTENSION_KEY]


@imgur_bp.route("/login")
def login():
    """
    Start the Imgur authorization flow.

    Query Parameters:
        next: URL to redirect to after successful login (optional)
    """
    extension = get_extension()

    # Generate state for CSRF protection
    state = secrets.token_urlsafe(32)
    session[SESSION_STATE_KEY] = state
    next_url = request.args.get("next")
    if not is_safe_redirect(next_url):
        if next_url:
            logger.warning(f"Ignoring off-site next URL: {next_url}")
        next_url = extension.config.login_success_redirect
    session[SESSION_RETURN_KEY] = next_url

    authorization_url, _ = extension.strategy.authorization_url(state=state)

    logger.info("Initiating Imgur login, redirecting to provider")
    logger.debug(f"Authorization URL: {authorization_url}")
    return redirect(authorization_url)


@imgur_bp.route("/callback")
def callback():
    """
    Imgur callback endpoint.

    Exchanges the authorization code, fetches the profile and runs the
    verify callback. Errors raised by the verify callback itself are left
    to the application's error handlers.
    """
    extension = get_extension()
    config = extension.config

    state = request.args.get("state")
    stored_state = session.pop(SESSION_STATE_KEY, None)

    error = request.args.get("error")
    if error:
        error_description = request.args.get("error_description", "Unknown error")
        logger.error(f"Imgur authorization error: {error} - {error_description}")
        return redirect(config.login_error_redirect)

    if not state or state != stored_state:
        logger.warning("Imgur OAuth2 state mismatch")
        return redirect(config.login_error_redirect)

    try:
        result = extension.strategy.authenticate(
            authorization_response=request.url,
            state=stored_state,
            request=request,
        )
    except AuthenticationFailed as e:
        logger.warning(f"Imgur login rejected: {e.info}")
        return redirect(config.login_error_redirect)
    except AuthenticationError as e:
        logger.exception(f"Error processing Imgur callback: {e}")
        return redirect(config.login_error_redirect)

    extension.on_login(result)

    return_url = session.pop(SESSION_RETURN_KEY, config.login_success_redirect)
    return redirect(return_url)


@imgur_bp.route("/logout")
def logout():
    """Forget the Imgur login."""
    config = get_extension().config

    for key in (SESSION_USER_KEY, SESSION_STATE_KEY, SESSION_RETURN_KEY):
        session.pop(key, None)

    logger.info("User logged out")
    return redirect(config.frontend_url)


@imgur_bp.route("/info")
def auth_info():
    """
    Return information about the Imgur login.

    This endpoint can be used by the frontend to display login options.
    """
    extension = get_extension()

    return jsonify({
        "provider": extension.strategy.name,
        "login_url": url_for("imgur_auth.login", _external=True),
        "configured": True,
    })
