"""Gmail connector (messages.list + metadata fetch per hit)."""

import asyncio
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass

from googleapiclient.discovery import Resource
from googleapiclient.errors import HttpError

from pkb.core.logger import logger
from pkb.search.errors import ConnectorSearchError
from pkb.search.interface import Connector
from pkb.search.models import Result

SOURCE_NAME = "gmail"
MAX_RESULTS = 20
MESSAGE_URL = "https://mail.google.com/mail/u/0/#inbox/{id}"


@dataclass(frozen=True)
class GmailMessage:
    id: str
    subject: str = ""
    snippet: str = ""
    sender: str = ""


class GmailClient(ABC):
    """Blocking Gmail API access, separated from the connector for testability."""

    @abstractmethod
    def search_messages(self, query: str) -> list[GmailMessage]:
        pass


def _header(headers: list[dict], name: str) -> str:
    for h in headers:
        if h.get("name") == name:
            return h.get("value", "")
    return ""


class GmailAPIClient(GmailClient):
    """GmailClient backed by a googleapiclient `gmail` v1 resource."""

    def __init__(self, service: Resource, user_id: str = "me"):
        self._service = service
        self._user_id = user_id
        self._lock = threading.Lock()

    def search_messages(self, query: str) -> list[GmailMessage]:
        with self._lock:
            return self._search(query)

    def _search(self, query: str) -> list[GmailMessage]:
        messages_api = self._service.users().messages()
        listing = messages_api.list(
            userId=self._user_id, q=query, maxResults=MAX_RESULTS
        ).execute()

        messages: list[GmailMessage] = []
        for ref in listing.get("messages", []):
            msg_id = ref.get("id", "")
            try:
                msg = messages_api.get(
                    userId=self._user_id,
                    id=msg_id,
                    format="metadata",
                    metadataHeaders=["Subject", "From"],
                ).execute()
            except HttpError as e:
                logger.debug(f"Skipping gmail message {msg_id}: {e}")
                continue
            headers = (msg.get("payload") or {}).get("headers", [])
            messages.append(
                GmailMessage(
                    id=msg_id,
                    subject=_header(headers, "Subject"),
                    snippet=msg.get("snippet", ""),
                    sender=_header(headers, "From"),
                )
            )
        return messages


class GmailConnector(Connector):
    def __init__(self, client: GmailClient):
        self._client = client

    async def search(self, query: str) -> list[Result]:
        try:
            messages = await asyncio.to_thread(self._client.search_messages, query)
        except Exception as e:
            raise ConnectorSearchError(f"gmail search: {e}") from e
        return [
            Result(
                title=m.subject,
                snippet=m.snippet,
                url=MESSAGE_URL.format(id=m.id),
                source=SOURCE_NAME,
            )
            for m in messages
        ]

    def get_source_name(self) -> str:
        return SOURCE_NAME
