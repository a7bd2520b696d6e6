"""CLI interface: one-shot search, interactive search loop, result formatting."""

import readline  # noqa: F401  (line editing for input())
from collections.abc import Awaitable, Callable

from pkb.core.logger import logger
from pkb.search.engine import parse_sources
from pkb.search.errors import PkbError
from pkb.search.models import Result

SearchFunc = Callable[[str, list[str] | None], Awaitable[list[Result]]]

SNIPPET_MAX_LEN = 80


class Colors:
    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    CYAN = "\033[36m"


def colorize(text: str, *colors: str) -> str:
    color_codes = "".join(colors)
    return f"{color_codes}{text}{Colors.RESET}"


def truncate_snippet(snippet: str, max_len: int = SNIPPET_MAX_LEN) -> str:
    if len(snippet) <= max_len:
        return snippet
    return snippet[: max_len - 3] + "..."


def format_results(results: list[Result]) -> str:
    """Numbered listing: title, snippet (when present), url, [source]."""
    if not results:
        return "No results found."
    blocks = []
    for i, r in enumerate(results, start=1):
        lines = [f"{i}. {r.title}"]
        snippet = truncate_snippet(r.snippet)
        if snippet:
            lines.append(f"   {snippet}")
        lines.append(f"   {r.url}")
        lines.append(f"   [{r.source}]")
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


async def run_search(query: str, search_fn: SearchFunc, sources: list[str] | None = None) -> int:
    text = (query or "").strip()
    if not text:
        print("Error: query must not be empty")
        return 2
    try:
        results = await search_fn(text, sources)
    except PkbError as e:
        print(f"Error: {e}")
        return 1
    print(format_results(results))
    return 0


def print_help(available: list[str]) -> None:
    names = ", ".join(available) if available else "none"
    help_text = f"""
    ╭──────────────────────────────────────────────╮
    │  Commands                                    │
    ├──────────────────────────────────────────────┤
    │  <text>          - Search for <text>         │
    │  /sources        - Show sources and filter   │
    │  /sources a,b    - Only search sources a, b  │
    │  /sources all    - Search every source       │
    │  /help           - Show this help            │
    │  /quit           - Exit                      │
    ╰──────────────────────────────────────────────╯
    Available sources: {names}
    """
    print(colorize(help_text, Colors.CYAN))


async def run_interactive(search_fn: SearchFunc, available: list[str] | None = None) -> int:
    available = available or []
    sources: list[str] | None = None
    print(colorize("  pkb interactive search. Type /help for commands\n", Colors.DIM))
    try:
        while True:
            try:
                line = input(colorize("\n❯ ", Colors.GREEN, Colors.BOLD))
            except EOFError:
                break
            text = line.strip()
            if not text:
                continue
            command = text.lower()

            if command == "/help":
                print_help(available)
                continue

            if command in ("/quit", "/exit", "/q"):
                break

            if command.startswith("/sources"):
                arg = text[len("/sources"):].strip()
                if arg.lower() == "all":
                    sources = None
                elif arg:
                    sources = parse_sources(arg)
                current = ", ".join(sources) if sources else "all"
                print(colorize(f"  Searching: {current}", Colors.YELLOW))
                continue

            try:
                results = await search_fn(text, sources)
            except PkbError as e:
                print(colorize(f"  Error: {e}", Colors.RED))
                continue
            except Exception as e:
                logger.error(f"Error during search: {e}", exc_info=True)
                print(colorize(f"  Error: {e}", Colors.RED))
                continue
            print()
            print(format_results(results))
    except KeyboardInterrupt:
        print()
    return 0
