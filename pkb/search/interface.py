"""Standard interface for the connectors the search engine fans out to."""

from abc import ABC, abstractmethod

from pkb.search.models import Result


class Connector(ABC):
    """Base for all data sources (Google Drive, Gmail, future ones)."""

    @abstractmethod
    async def search(self, query: str) -> list[Result]:
        """Run the query against the source. Raise on failure."""
        pass

    @abstractmethod
    def get_source_name(self) -> str:
        """Return the stable source name (e.g. 'google-drive', 'gmail')."""
        pass
