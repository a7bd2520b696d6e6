from unittest.mock import MagicMock

import pytest
from googleapiclient.errors import HttpError

from pkb.connectors.gdrive import (
    DriveAPIClient,
    DriveClient,
    DriveConnector,
    DriveFile,
    build_search_query,
)
from pkb.connectors.gmail import GmailAPIClient, GmailClient, GmailConnector, GmailMessage
from pkb.search.errors import ConnectorSearchError
from pkb.search.models import Result


class FakeDriveClient(DriveClient):
    def __init__(self, files=None, error=None):
        self.files = files or []
        self.error = error
        self.queries = []

    def search_files(self, query):
        self.queries.append(query)
        if self.error:
            raise self.error
        return self.files


class FakeGmailClient(GmailClient):
    def __init__(self, messages=None, error=None):
        self.messages = messages or []
        self.error = error

    def search_messages(self, query):
        if self.error:
            raise self.error
        return self.messages


def _http_error(status: int = 404) -> HttpError:
    return HttpError(MagicMock(status=status, reason="Not Found"), b"not found")


class TestBuildSearchQuery:
    def test_plain_query(self):
        assert build_search_query("budget") == "fullText contains 'budget' and trashed = false"

    def test_escapes_single_quotes(self):
        assert build_search_query("bob's notes") == (
            "fullText contains 'bob\\'s notes' and trashed = false"
        )

    def test_escapes_backslash_before_quote(self):
        # A trailing backslash must not swallow the closing quote.
        assert build_search_query("a\\") == "fullText contains 'a\\\\' and trashed = false"
        assert build_search_query("\\'") == "fullText contains '\\\\\\'' and trashed = false"


class TestDriveConnector:
    @pytest.mark.asyncio
    async def test_maps_files_to_results(self):
        client = FakeDriveClient(
            files=[
                DriveFile(id="1", name="Plan.docx", web_view_link="https://drive/1"),
                DriveFile(id="2", name="Notes", mime_type="text/plain", web_view_link="https://drive/2"),
            ]
        )
        connector = DriveConnector(client)

        results = await connector.search("plan")

        assert results == [
            Result(title="Plan.docx", url="https://drive/1", source="google-drive"),
            Result(title="Notes", url="https://drive/2", source="google-drive"),
        ]
        assert client.queries == ["plan"]

    @pytest.mark.asyncio
    async def test_wraps_client_errors(self):
        connector = DriveConnector(FakeDriveClient(error=RuntimeError("quota exceeded")))

        with pytest.raises(ConnectorSearchError, match="google drive search: quota exceeded"):
            await connector.search("x")

    @pytest.mark.asyncio
    async def test_no_files_is_empty_list(self):
        assert await DriveConnector(FakeDriveClient()).search("x") == []

    def test_source_name(self):
        assert DriveConnector(FakeDriveClient()).get_source_name() == "google-drive"


class TestDriveAPIClient:
    def test_lists_files_with_escaped_query(self):
        service = MagicMock()
        service.files.return_value.list.return_value.execute.return_value = {
            "files": [
                {"id": "1", "name": "Report", "mimeType": "application/pdf", "webViewLink": "https://d/1"},
                {"id": "2", "name": "Untitled"},
            ]
        }

        files = DriveAPIClient(service).search_files("it's")

        service.files.return_value.list.assert_called_once_with(
            q="fullText contains 'it\\'s' and trashed = false",
            fields="files(id, name, mimeType, webViewLink)",
            pageSize=50,
        )
        assert files == [
            DriveFile(id="1", name="Report", mime_type="application/pdf", web_view_link="https://d/1"),
            DriveFile(id="2", name="Untitled"),
        ]

    def test_missing_files_key(self):
        service = MagicMock()
        service.files.return_value.list.return_value.execute.return_value = {}
        assert DriveAPIClient(service).search_files("x") == []


class TestGmailConnector:
    @pytest.mark.asyncio
    async def test_maps_messages_to_results(self):
        connector = GmailConnector(
            FakeGmailClient(
                messages=[GmailMessage(id="abc", subject="Invoice", snippet="Your invoice", sender="a@b.c")]
            )
        )

        results = await connector.search("invoice")

        assert results == [
            Result(
                title="Invoice",
                snippet="Your invoice",
                url="https://mail.google.com/mail/u/0/#inbox/abc",
                source="gmail",
            )
        ]

    @pytest.mark.asyncio
    async def test_wraps_client_errors(self):
        connector = GmailConnector(FakeGmailClient(error=ConnectionError("connection refused")))

        with pytest.raises(ConnectorSearchError, match="gmail search: connection refused"):
            await connector.search("x")

    def test_source_name(self):
        assert GmailConnector(FakeGmailClient()).get_source_name() == "gmail"


class TestGmailAPIClient:
    @staticmethod
    def _service(listing, fetched):
        service = MagicMock()
        messages_api = service.users.return_value.messages.return_value
        messages_api.list.return_value.execute.return_value = listing

        def get(userId, id, format, metadataHeaders):
            request = MagicMock()
            outcome = fetched[id]
            if isinstance(outcome, Exception):
                request.execute.side_effect = outcome
            else:
                request.execute.return_value = outcome
            return request

        messages_api.get.side_effect = get
        return service, messages_api

    def test_fetches_subject_and_sender_headers(self):
        service, messages_api = self._service(
            {"messages": [{"id": "m1"}]},
            {
                "m1": {
                    "snippet": "See attached",
                    "payload": {
                        "headers": [
                            {"name": "From", "value": "alice@example.com"},
                            {"name": "Subject", "value": "Q3 report"},
                        ]
                    },
                }
            },
        )

        messages = GmailAPIClient(service).search_messages("report")

        messages_api.list.assert_called_once_with(userId="me", q="report", maxResults=20)
        messages_api.get.assert_called_once_with(
            userId="me", id="m1", format="metadata", metadataHeaders=["Subject", "From"]
        )
        assert messages == [
            GmailMessage(id="m1", subject="Q3 report", snippet="See attached", sender="alice@example.com")
        ]

    def test_skips_messages_that_fail_to_load(self):
        service, _ = self._service(
            {"messages": [{"id": "gone"}, {"id": "ok"}]},
            {
                "gone": _http_error(404),
                "ok": {"snippet": "hi", "payload": {"headers": [{"name": "Subject", "value": "Hello"}]}},
            },
        )

        messages = GmailAPIClient(service).search_messages("x")

        assert messages == [GmailMessage(id="ok", subject="Hello", snippet="hi")]

    def test_no_matches(self):
        service, messages_api = self._service({"resultSizeEstimate": 0}, {})

        assert GmailAPIClient(service).search_messages("nothing") == []
        messages_api.get.assert_not_called()

    def test_list_failure_propagates(self):
        service = MagicMock()
        service.users.return_value.messages.return_value.list.return_value.execute.side_effect = (
            _http_error(401)
        )

        with pytest.raises(HttpError):
            GmailAPIClient(service).search_messages("x")
