"""Authenticated Google Calendar client."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

import httplib2
from google.oauth2.credentials import Credentials
from google_auth_httplib2 import AuthorizedHttp
from googleapiclient.discovery import build

from ..config.config_schema import HangoutsConfig

logger = logging.getLogger(__name__)

CALENDAR_API = "calendar"
CALENDAR_API_VERSION = "v3"
TOKEN_URI = "https://oauth2.googleapis.com/token"


@dataclass(frozen=True)
class CalendarClient:
    """Discovered calendar service plus the OAuth2 context that authorizes it."""

    service: Any
    credentials: Credentials
    redirect_uri: str

    def authorized_http(self) -> AuthorizedHttp:
        """
        Create an authorized transport for a single request.

        httplib2.Http is not thread-safe, so every request executed in a
        worker thread gets its own.
        """
        return AuthorizedHttp(self.credentials, http=httplib2.Http())


def build_credentials(config: HangoutsConfig) -> Credentials:
    """
    Build OAuth2 credentials seeded with the refresh token.

    No access token is set; google-auth fetches one on the first request.
    """
    return Credentials(
        token=None,
        refresh_token=config.refresh,
        token_uri=TOKEN_URI,
        client_id=config.key,
        client_secret=config.secret,
    )


def discover_service(credentials: Credentials):
    """Fetch the calendar v3 discovery document and build the service (blocking)."""
    return build(
        CALENDAR_API,
        CALENDAR_API_VERSION,
        credentials=credentials,
        static_discovery=False,
        cache_discovery=False,
    )


async def load_client(config: HangoutsConfig) -> CalendarClient:
    """
    Build the authenticated calendar client.

    Args:
        config: Hangout plugin configuration

    Returns:
        CalendarClient ready for event inserts

    Raises:
        Exception: Whatever discovery raised (HttpError, transport errors, ...)
    """
    credentials = build_credentials(config)

    logger.info(f"Discovering Google Calendar API {CALENDAR_API}/{CALENDAR_API_VERSION}")
    try:
        service = await asyncio.to_thread(discover_service, credentials)
    except Exception as e:
        logger.error(f"Error connecting to Google Calendar: {e}")
        raise

    logger.info(f"Google Calendar client ready (calendar: {config.id})")
    return CalendarClient(
        service=service,
        credentials=credentials,
        redirect_uri=config.redirect,
    )
