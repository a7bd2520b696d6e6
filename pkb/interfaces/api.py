"""HTTP API: GET /search fans a query out through the engine, GET /health reports sources,
GET / serves the browser search page."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from fastapi import FastAPI, Query
from fastapi.responses import HTMLResponse, JSONResponse

from pkb import __version__
from pkb.core.logger import logger
from pkb.search.engine import SearchEngine, parse_sources
from pkb.search.errors import AllConnectorsFailedError, ConfigurationError

STATIC_DIR = Path(__file__).parent / "static"


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def create_app(
    engine: SearchEngine | None = None,
    engine_factory: Callable[[], SearchEngine] | None = None,
) -> FastAPI:
    """Build the app around an engine, or a factory called on first use."""
    if engine is None and engine_factory is None:
        from pkb.bootstrap import build_engine

        engine_factory = build_engine

    app = FastAPI(title="pkb", version=__version__)
    state: dict[str, SearchEngine | None] = {"engine": engine}

    def get_engine() -> SearchEngine:
        if state["engine"] is None:
            state["engine"] = engine_factory()
        return state["engine"]

    @app.get("/", response_class=HTMLResponse)
    async def index():
        return HTMLResponse((STATIC_DIR / "index.html").read_text(encoding="utf-8"))

    @app.get("/health")
    async def health():
        try:
            sources = get_engine().source_names
        except ConfigurationError as e:
            return JSONResponse(status_code=503, content={"status": "unconfigured", "error": str(e)})
        return {"status": "ok", "sources": sources}

    @app.get("/search")
    async def search(
        q: str | None = Query(default=None, description="Search query"),
        sources: str | None = Query(default=None, description="Comma-separated source names"),
    ):
        if not q:
            return _error(400, "missing required parameter: q")
        try:
            results = await get_engine().search_with_sources(q, parse_sources(sources))
        except ConfigurationError as e:
            logger.error(f"Search unavailable: {e}")
            return _error(500, str(e))
        except AllConnectorsFailedError as e:
            return _error(500, str(e))
        return [r.model_dump() for r in results]

    return app
