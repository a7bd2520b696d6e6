"""Fan-out search: engine, connector interface and result models."""

from pkb.search.engine import SearchEngine, parse_sources
from pkb.search.errors import (
    AllConnectorsFailedError,
    ConfigurationError,
    ConnectorError,
    ConnectorSearchError,
    PkbError,
)
from pkb.search.interface import Connector
from pkb.search.models import Result, SearchResponse

__all__ = [
    "AllConnectorsFailedError",
    "ConfigurationError",
    "Connector",
    "ConnectorError",
    "ConnectorSearchError",
    "PkbError",
    "Result",
    "SearchEngine",
    "SearchResponse",
    "parse_sources",
]
