"""Exceptions raised by the search engine and its connectors."""

from collections.abc import Sequence


class PkbError(Exception):
    """Base for all pkb errors."""


class ConfigurationError(PkbError):
    """Credentials or token missing; message carries setup instructions."""


class ConnectorSearchError(PkbError):
    """A connector's API client failed."""


class ConnectorError(PkbError):
    """A single connector's failure, annotated with the connector's name."""

    def __init__(self, source: str, cause: BaseException):
        self.source = source
        self.cause = cause
        super().__init__(f"{source}: {cause}")
        self.__cause__ = cause


class AllConnectorsFailedError(PkbError):
    """Every selected connector failed; carries each per-connector error."""

    def __init__(self, errors: Sequence[ConnectorError]):
        self.errors = list(errors)
        detail = "; ".join(str(e) for e in self.errors)
        super().__init__(f"all connectors failed: {detail}")

    @property
    def sources(self) -> list[str]:
        return [e.source for e in self.errors]
