from pkb.connectors.gdrive import DriveAPIClient, DriveClient, DriveConnector, DriveFile
from pkb.connectors.gmail import GmailAPIClient, GmailClient, GmailConnector, GmailMessage

__all__ = [
    "DriveAPIClient",
    "DriveClient",
    "DriveConnector",
    "DriveFile",
    "GmailAPIClient",
    "GmailClient",
    "GmailConnector",
    "GmailMessage",
]
