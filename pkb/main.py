"""Entry point: search | serve | interactive | auth | version."""

import argparse
import asyncio
import sys

from pkb import __version__


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pkb", description="Personal Knowledge Base: search across all your services"
    )
    sub = parser.add_subparsers(dest="mode")

    search = sub.add_parser("search", help="Search across all connected services")
    search.add_argument("query", nargs="+")
    search.add_argument("--sources", default="", help="Comma-separated source names (default: all)")
    search.add_argument("--server", default="", help="Query a running pkb server instead of Google directly")

    serve = sub.add_parser("serve", help="Start the HTTP API server")
    serve.add_argument("--addr", default="", help="Listen address, e.g. :8080 (default: PKB_SERVER_ADDR)")

    interactive = sub.add_parser("interactive", aliases=["tui"], help="Interactive search loop")
    interactive.add_argument("--server", default="", help="Query a running pkb server")

    sub.add_parser("auth", help="Authenticate with Google (opens browser for OAuth flow)")
    sub.add_parser("version", help="Print the version of pkb")
    return parser


async def _run_search(query: str, sources: list[str] | None, server: str) -> int:
    from pkb.interfaces.cli import run_search

    if server:
        from pkb.interfaces.api_client import PkbClient

        async with PkbClient(server) as client:
            return await run_search(query, client.search, sources)

    from pkb.bootstrap import build_engine
    from pkb.search.errors import ConfigurationError

    try:
        engine = build_engine()
    except ConfigurationError as e:
        print(f"Error: {e}")
        return 1
    return await run_search(query, engine.search_with_sources, sources)


async def _run_interactive(server: str) -> int:
    from pkb.interfaces.cli import run_interactive

    if server:
        from pkb.interfaces.api_client import PkbClient

        async with PkbClient(server) as client:
            return await run_interactive(client.search)

    from pkb.bootstrap import build_engine
    from pkb.search.errors import ConfigurationError

    try:
        engine = build_engine()
    except ConfigurationError as e:
        print(f"Error: {e}")
        return 1
    return await run_interactive(engine.search_with_sources, engine.source_names)


def _serve(addr: str) -> int:
    import uvicorn

    from pkb.core.config import config
    from pkb.core.logger import logger
    from pkb.interfaces.api import create_app

    if addr:
        config.server_addr = addr
    problems = config.validate()
    for problem in problems:
        logger.warning(f"Startup check: {problem}")
    try:
        host, port = config.server_host_port()
    except ValueError:
        print(f"Error: invalid listen address {config.server_addr!r}")
        return 1
    print(f"Listening on {host}:{port}")
    uvicorn.run(create_app(), host=host, port=port, log_level=config.log_level.lower())
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.mode == "search":
        from pkb.search.engine import parse_sources

        query = " ".join(args.query)
        return asyncio.run(_run_search(query, parse_sources(args.sources), args.server))

    if args.mode == "serve":
        return _serve(args.addr)

    if args.mode in ("interactive", "tui"):
        return asyncio.run(_run_interactive(args.server))

    if args.mode == "auth":
        from pkb.services.google_auth import run_google_auth

        return run_google_auth()

    if args.mode == "version":
        print(f"pkb version {__version__}")
        return 0

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
