"""
Google API access for Drive and Gmail.
Handles token loading, refreshing, and building of API service objects.
"""

import json
from datetime import datetime
from pathlib import Path

from google.auth.exceptions import RefreshError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import Resource, build

from pkb.core.config import config
from pkb.core.logger import logger

TOKEN_URI = "https://oauth2.googleapis.com/token"
SCOPES = [
    "https://www.googleapis.com/auth/drive.readonly",
    "https://www.googleapis.com/auth/gmail.readonly",
]


def save_token(path: Path, creds: Credentials) -> None:
    """Writes the OAuth token to disk (owner-readable only)."""
    data = {
        "access_token": creds.token,
        "refresh_token": creds.refresh_token,
        "expiry": creds.expiry.isoformat() if creds.expiry else None,
    }
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(data, f, indent=2)
    path.chmod(0o600)


def load_credentials(path: Path) -> Credentials | None:
    """Loads credentials from the token file, or None when it does not exist."""
    if not path.exists():
        return None
    with open(path) as f:
        data = json.load(f)

    creds = Credentials(
        token=data.get("access_token"),
        refresh_token=data.get("refresh_token"),
        token_uri=TOKEN_URI,
        client_id=config.google_client_id,
        client_secret=config.google_client_secret,
        scopes=SCOPES,
    )
    if data.get("expiry"):
        try:
            # google-auth compares expiry against a naive UTC datetime
            expiry = datetime.fromisoformat(data["expiry"].replace("Z", "+00:00"))
            creds.expiry = expiry.replace(tzinfo=None)
        except (ValueError, TypeError):
            pass
    return creds


class GoogleService:
    """Credentials plus the Drive and Gmail API resources built from them."""

    def __init__(self, path: Path | None = None):
        self._token_path = path or config.token_path
        self._creds: Credentials | None = None
        self._drive_api: Resource | None = None
        self._gmail_api: Resource | None = None

        self._reload_credentials()

    def _reload_credentials(self) -> None:
        """Loads credentials from disk and refreshes them if necessary."""
        self._creds = load_credentials(self._token_path)

        if self._creds and self._creds.valid:
            self._build_api_resources()
        elif self._creds and self._creds.expired and self._creds.refresh_token:
            try:
                self._creds.refresh(Request())
                save_token(self._token_path, self._creds)
                self._build_api_resources()
                logger.info("Google API token refreshed.")
            except RefreshError as e:
                logger.error(f"Failed to refresh Google API token: {e}")
                logger.error("Try re-authenticating: pkb auth")
                self._creds = None
        else:
            self._creds = None

    def _build_api_resources(self):
        if not self._creds:
            return
        try:
            self._drive_api = build("drive", "v3", credentials=self._creds, cache_discovery=False)
        except Exception as e:
            logger.error(f"Failed to build Google Drive API resource: {e}")
            self._drive_api = None
        try:
            self._gmail_api = build("gmail", "v1", credentials=self._creds, cache_discovery=False)
        except Exception as e:
            logger.error(f"Failed to build Gmail API resource: {e}")
            self._gmail_api = None

    @property
    def has_credentials(self) -> bool:
        return self._creds is not None

    @property
    def drive(self) -> Resource:
        if not self._drive_api:
            raise RuntimeError("Google Drive API not available. Please authenticate: pkb auth")
        return self._drive_api

    @property
    def gmail(self) -> Resource:
        if not self._gmail_api:
            raise RuntimeError("Gmail API not available. Please authenticate: pkb auth")
        return self._gmail_api
