"""Search engine: fan one query out to every selected connector, merge what comes back."""

import asyncio
import time
from collections.abc import Iterable

from pkb.core.logger import logger
from pkb.search.errors import AllConnectorsFailedError, ConnectorError
from pkb.search.interface import Connector
from pkb.search.models import Result, SearchResponse


def parse_sources(raw: str | None) -> list[str] | None:
    """'a, b,,c' -> ['a', 'b', 'c']; missing or blank -> None (search everything)."""
    if not raw:
        return None
    names = [s.strip() for s in raw.split(",") if s.strip()]
    return names or None


class SearchEngine:
    """Queries connectors concurrently and tolerates partial failure.

    The connector set is fixed at construction. A call never mutates engine
    state, so one engine can serve concurrent callers.

    Results from healthy connectors are returned even when others fail; an
    error is raised only when every selected connector failed. Result order
    across connectors follows completion and is not guaranteed.
    """

    def __init__(self, *connectors: Connector):
        self._connectors: tuple[Connector, ...] = tuple(connectors)

    @property
    def source_names(self) -> list[str]:
        return [c.get_source_name() for c in self._connectors]

    def _select(self, sources: Iterable[str] | None) -> list[Connector]:
        if isinstance(sources, str):
            sources = [sources]
        wanted = set(sources or ())
        if not wanted:
            return list(self._connectors)
        # Unknown names are ignored: a stale filter yields fewer sources, not an error.
        return [c for c in self._connectors if c.get_source_name() in wanted]

    async def _run_connector(
        self, connector: Connector, query: str
    ) -> tuple[list[Result], ConnectorError | None]:
        name = connector.get_source_name()
        try:
            results = await connector.search(query)
            return list(results or []), None
        except Exception as e:
            logger.connector_failed(name, e)
            return [], ConnectorError(name, e)

    async def search_detailed(
        self, query: str, sources: Iterable[str] | None = None
    ) -> SearchResponse:
        """Fan out and return results together with the tolerated failures.

        Raises AllConnectorsFailedError when every selected connector failed.
        """
        selected = self._select(sources)
        names = [c.get_source_name() for c in selected]
        if not selected:
            logger.debug(f"No connectors selected for {query[:80]!r} (filter: {sources})")
            return SearchResponse(results=[], errors=[], sources_queried=[])

        logger.search_started(query, names)
        started = time.monotonic()
        tasks = [asyncio.create_task(self._run_connector(c, query)) for c in selected]
        outcomes = await asyncio.gather(*tasks)

        all_results: list[Result] = []
        errors: list[ConnectorError] = []
        for results, error in outcomes:
            if error is not None:
                errors.append(error)
                continue
            all_results.extend(results)

        logger.search_finished(
            query, len(all_results), [e.source for e in errors], time.monotonic() - started
        )
        if len(errors) == len(selected):
            raise AllConnectorsFailedError(errors)

        return SearchResponse(
            results=all_results,
            errors=[str(e) for e in errors],
            sources_queried=names,
        )

    async def search_with_sources(
        self, query: str, sources: Iterable[str] | None = None
    ) -> list[Result]:
        """Search only the connectors named in sources (None or empty: all of them)."""
        response = await self.search_detailed(query, sources)
        return response.results

    async def search(self, query: str) -> list[Result]:
        """Search every connector."""
        return await self.search_with_sources(query, None)
