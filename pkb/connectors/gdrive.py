"""Google Drive connector (files.list full-text search)."""

import asyncio
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass

from googleapiclient.discovery import Resource

from pkb.search.errors import ConnectorSearchError
from pkb.search.interface import Connector
from pkb.search.models import Result

SOURCE_NAME = "google-drive"
PAGE_SIZE = 50


@dataclass(frozen=True)
class DriveFile:
    id: str
    name: str
    mime_type: str = ""
    web_view_link: str = ""


class DriveClient(ABC):
    """Blocking Drive API access, separated from the connector for testability."""

    @abstractmethod
    def search_files(self, query: str) -> list[DriveFile]:
        pass


def build_search_query(query: str) -> str:
    """Drive `q` expression for a full-text search; escapes backslashes and quotes."""
    escaped = query.replace("\\", "\\\\").replace("'", "\\'")
    return f"fullText contains '{escaped}' and trashed = false"


class DriveAPIClient(DriveClient):
    """DriveClient backed by a googleapiclient `drive` v3 resource."""

    def __init__(self, service: Resource):
        self._service = service
        self._lock = threading.Lock()

    def search_files(self, query: str) -> list[DriveFile]:
        with self._lock:
            response = self._list(query)
        return [
            DriveFile(
                id=f.get("id", ""),
                name=f.get("name", ""),
                mime_type=f.get("mimeType", ""),
                web_view_link=f.get("webViewLink", ""),
            )
            for f in response.get("files", [])
        ]

    def _list(self, query: str) -> dict:
        return (
            self._service.files()
            .list(
                q=build_search_query(query),
                fields="files(id, name, mimeType, webViewLink)",
                pageSize=PAGE_SIZE,
            )
            .execute()
        )


class DriveConnector(Connector):
    def __init__(self, client: DriveClient):
        self._client = client

    async def search(self, query: str) -> list[Result]:
        try:
            files = await asyncio.to_thread(self._client.search_files, query)
        except Exception as e:
            raise ConnectorSearchError(f"google drive search: {e}") from e
        return [
            Result(title=f.name, url=f.web_view_link, source=SOURCE_NAME)
            for f in files
        ]

    def get_source_name(self) -> str:
        return SOURCE_NAME
