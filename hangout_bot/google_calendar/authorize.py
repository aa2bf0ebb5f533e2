"""CLI that exchanges an OAuth2 consent code for a calendar refresh token."""

import argparse
import logging
import sys
from typing import Optional

from google_auth_oauthlib.flow import Flow

from ..config.config_loader import ConfigLoader
from ..config.config_schema import DEFAULT_REDIRECT_URI
from ..utils.logging import setup_logging
from .client import TOKEN_URI

logger = logging.getLogger(__name__)

AUTH_URI = "https://accounts.google.com/o/oauth2/auth"
SCOPES = ["https://www.googleapis.com/auth/calendar"]


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(
        description="Obtain a Google Calendar refresh token for the hangout plugin",
        prog="hangout-bot-authorize",
    )

    parser.add_argument(
        "-c",
        "--config",
        default=None,
        help="Read key, secret and redirect from the hangouts section of this file",
    )
    parser.add_argument("--key", help="OAuth2 client id")
    parser.add_argument("--secret", help="OAuth2 client secret")
    parser.add_argument(
        "--redirect",
        help=f"OAuth2 redirect URI (default: {DEFAULT_REDIRECT_URI})",
    )
    parser.add_argument(
        "--code",
        help="Authorization code; prompted for when omitted",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v, -vv, -vvv)",
    )

    return parser


def create_flow(key: str, secret: str, redirect: str) -> Flow:
    """Build the web-application OAuth2 flow for the calendar scope."""
    return Flow.from_client_config(
        {
            "web": {
                "client_id": key,
                "client_secret": secret,
                "auth_uri": AUTH_URI,
                "token_uri": TOKEN_URI,
                "redirect_uris": [redirect],
            }
        },
        scopes=SCOPES,
        redirect_uri=redirect,
    )


def authorization_url(flow: Flow) -> str:
    """Consent URL that yields a refresh token (offline access, forced consent)."""
    url, _state = flow.authorization_url(
        access_type="offline",
        include_granted_scopes="true",
        prompt="consent",
    )
    return url


def exchange_code(flow: Flow, code: str) -> Optional[str]:
    """Exchange the authorization code and return the refresh token, if any."""
    flow.fetch_token(code=code)
    return flow.credentials.refresh_token


def main(argv: Optional[list] = None) -> int:
    """Run the authorization flow interactively."""
    args = create_parser().parse_args(argv)
    setup_logging(verbosity=args.verbose)

    options = {}
    if args.config:
        try:
            options = ConfigLoader.read_yaml(args.config).get("hangouts") or {}
        except (FileNotFoundError, ValueError) as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

    key = args.key or options.get("key")
    secret = args.secret or options.get("secret")
    redirect = args.redirect or options.get("redirect") or DEFAULT_REDIRECT_URI

    if not key or not secret:
        print("Error: client key and secret are required (--key/--secret or --config)", file=sys.stderr)
        return 1

    flow = create_flow(key, secret, redirect)

    print("Open this URL in a browser and grant calendar access:")
    print()
    print(f"  {authorization_url(flow)}")
    print()

    code = args.code or input("Authorization code: ").strip()
    if not code:
        print("Error: no authorization code given", file=sys.stderr)
        return 1

    try:
        refresh_token = exchange_code(flow, code)
    except Exception as e:
        logger.error(f"Token exchange failed: {e}", exc_info=True)
        print(f"Error: token exchange failed: {e}", file=sys.stderr)
        return 1

    if not refresh_token:
        print(
            "Error: Google did not return a refresh token. "
            "Revoke the app's access and authorize again.",
            file=sys.stderr,
        )
        return 1

    print("Set this as hangouts.refresh in your configuration:")
    print()
    print(f"  {refresh_token}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
