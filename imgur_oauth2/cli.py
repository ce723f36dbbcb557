"""
Flask CLI commands for the Imgur login integration.

These commands help with setup and debugging of the Imgur OAuth2
configuration.
"""

import json

import click
import httpx
from flask import current_app
from flask.cli import with_appcontext

from .blueprint import EXTENSION_KEY
from .config import ENV_PREFIX, ImgurOAuth2Config
from .exceptions import ConfigurationError, ProfileFetchError
from .oauth2_client import OAuth2Client
from .profile import ProfileFetcher


def _load_config() -> ImgurOAuth2Config:
    extension = current_app.extensions.get(EXTENSION_KEY)
    if extension is not None:
        return extension.config.oauth2
    return ImgurOAuth2Config.from_env()


def _fetch_profile(config: ImgurOAuth2Config, token: str):
    extension = current_app.extensions.get(EXTENSION_KEY)
    if extension is not None:
        return extension.strategy.user_profile(token)

    client = OAuth2Client(
        client_id=config.client_id,
        client_secret=config.client_secret,
        authorization_url=config.authorization_url,
        token_url=config.token_url,
        redirect_uri=config.callback_url,
        timeout=config.timeout,
    )
    return ProfileFetcher(client, config.api_base_url).fetch(token)


@click.group("imgur")
def imgur_cli():
    """Imgur OAuth2 login management commands."""
    pass


@imgur_cli.command("show-config")
@with_appcontext
def show_config():
    """Display current Imgur OAuth2 configuration."""
    try:
        config = _load_config()
    except ConfigurationError as e:
        click.echo(f"Error: {e}", err=True)
        return

    click.echo("=== Imgur OAuth2 Configuration ===")
    for key, value in config.describe().items():
        click.echo(f"{key}: {value}")


@imgur_cli.command("validate-config")
@with_appcontext
def validate_config():
    """Validate the current configuration."""
    try:
        config = _load_config()
    except ConfigurationError as e:
        click.echo("\n=== Errors ===")
        click.echo(f"  x {e}")
        click.echo(f"\nSet {ENV_PREFIX}CLIENT_ID, {ENV_PREFIX}CLIENT_SECRET "
                   f"and {ENV_PREFIX}CALLBACK_URL")
        return

    if not config.callback_url.startswith("https://"):
        click.echo("=== Warnings ===")
        click.echo(f"  ! Callback URL is not HTTPS: {config.callback_url}")

    click.echo("\n[OK] Configuration is valid!")


@imgur_cli.command("show-profile")
@click.option("--token", required=True, help="Imgur access token")
@with_appcontext
def show_profile(token):
    """Fetch and print the normalized profile for an access token."""
    try:
        config = _load_config()
        profile = _fetch_profile(config, token)
    except (ConfigurationError, ProfileFetchError) as e:
        raise click.ClickException(str(e))

    click.echo(json.dumps(profile.to_dict(), indent=2, sort_keys=True))


@imgur_cli.command("test-connection")
@with_appcontext
def test_connection():
    """Test connectivity to the Imgur endpoints."""
    try:
        config = _load_config()
    except ConfigurationError as e:
        click.echo(f"Error: {e}", err=True)
        return

    click.echo("=== Testing Imgur Connectivity ===\n")

    for label, url in (
        ("Authorization URL", config.authorization_url),
        ("Token URL", config.token_url),
        ("API base URL", config.api_base_url),
    ):
        try:
            with httpx.Client() as client:
                client.head(url, follow_redirects=True, timeout=config.timeout)
            click.echo(f"[OK] {label} reachable: {url}")
        except httpx.HTTPError as e:
            click.echo(f"[FAIL] {label}: {e}")
