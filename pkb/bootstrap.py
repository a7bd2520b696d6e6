"""Wires configuration, stored credentials and connectors into a SearchEngine."""

from pkb.connectors.gdrive import DriveAPIClient, DriveConnector
from pkb.connectors.gmail import GmailAPIClient, GmailConnector
from pkb.core.config import config
from pkb.core.logger import logger
from pkb.search.engine import SearchEngine
from pkb.search.errors import ConfigurationError
from pkb.search.interface import Connector
from pkb.services.google_auth import MISSING_CREDENTIALS_HELP
from pkb.services.google_service import GoogleService


def build_engine(service: GoogleService | None = None) -> SearchEngine:
    """Build the engine from the stored Google token.

    Drive is required; Gmail is added when its API resource is available,
    otherwise the engine searches Drive only.
    """
    if not config.has_google_credentials:
        raise ConfigurationError(MISSING_CREDENTIALS_HELP)

    if service is None:
        if not config.token_path.exists():
            raise ConfigurationError(
                f"OAuth token not found at {config.token_path}.\n\n"
                "You may need to complete the OAuth flow first: pkb auth"
            )
        service = GoogleService(config.token_path)

    if not service.has_credentials:
        raise ConfigurationError(
            f"Failed to load a usable OAuth token from {config.token_path}.\n\n"
            "Re-authenticate with: pkb auth"
        )

    try:
        drive = service.drive
    except RuntimeError as e:
        raise ConfigurationError(f"Failed to create Google Drive client: {e}") from e
    connectors: list[Connector] = [DriveConnector(DriveAPIClient(drive))]

    try:
        connectors.append(GmailConnector(GmailAPIClient(service.gmail)))
    except RuntimeError as e:
        logger.warning(f"Gmail unavailable, searching Google Drive only: {e}")

    return SearchEngine(*connectors)
