"""
Google service construction from service account credentials.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from google.oauth2 import service_account
from googleapiclient.discovery import build

from core.utils import UserInputError

logger = logging.getLogger(__name__)

SCOPES = [
    "https://www.googleapis.com/auth/spreadsheets",
    "https://www.googleapis.com/auth/drive",
    "https://www.googleapis.com/auth/gmail.send",
]


@dataclass
class GoogleServices:
    sheets: Any
    drive: Any
    gmail: Any


def load_credentials(
    credentials_json: str, scopes: Optional[Sequence[str]] = None
) -> service_account.Credentials:
    """Parse a service account JSON string into scoped credentials."""
    try:
        info = json.loads(credentials_json)
    except json.JSONDecodeError as exc:
        raise UserInputError(f"Google credentials are not valid JSON: {exc}") from exc
    if not isinstance(info, dict):
        raise UserInputError("Google credentials must be a JSON object.")

    try:
        return service_account.Credentials.from_service_account_info(
            info, scopes=list(scopes or SCOPES)
        )
    except ValueError as exc:
        raise UserInputError(f"Invalid service account credentials: {exc}") from exc


def build_services(credentials_json: str) -> GoogleServices:
    """Build Sheets v4, Drive v3 and Gmail v1 clients sharing one credential."""
    credentials = load_credentials(credentials_json)
    logger.info(
        f"Building Google services for {getattr(credentials, 'service_account_email', 'unknown')}"
    )
    return GoogleServices(
        sheets=build("sheets", "v4", credentials=credentials, cache_discovery=False),
        drive=build("drive", "v3", credentials=credentials, cache_discovery=False),
        gmail=build("gmail", "v1", credentials=credentials, cache_discovery=False),
    )
