"""Construction of the Google Drive v3 client from service-account credentials."""

import logging
from typing import Optional

from google.oauth2 import service_account
from googleapiclient.discovery import Resource, build

from drive_files_api.config.settings import Settings
from drive_files_api.errors import ProviderError

logger = logging.getLogger(__name__)

DRIVE_SCOPES = ["https://www.googleapis.com/auth/drive"]
TOKEN_URI = "https://oauth2.googleapis.com/token"


def build_credentials(service_account_email: Optional[str], private_key: Optional[str]):
    """
    Build JWT credentials for a service account.

    :param service_account_email: The `client_email` of the service account.
    :param private_key: The PEM private key, with real newlines.
    :raises ProviderError: when either value is missing.
    """
    if not service_account_email or not private_key:
        raise ProviderError("Google service account credentials not configured")

    info = {
        "type": "service_account",
        "client_email": service_account_email,
        "private_key": private_key,
        "token_uri": TOKEN_URI,
    }
    return service_account.Credentials.from_service_account_info(info, scopes=DRIVE_SCOPES)


def get_drive_service(settings: Settings) -> Resource:
    """Create a Drive v3 resource for the configured service account."""
    credentials = build_credentials(
        settings.google_service_account_email,
        settings.google_private_key,
    )
    logger.debug(f"Building Drive client for {settings.google_service_account_email}")
    return build("drive", "v3", credentials=credentials, cache_discovery=False)
