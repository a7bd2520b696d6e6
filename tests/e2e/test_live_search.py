"""Live searches against the configured Google account. Opt-in: --run-integration."""

import asyncio

import pytest

from pkb.bootstrap import build_engine
from pkb.core.config import config


@pytest.fixture(scope="module")
def engine():
    problems = config.validate()
    if problems:
        pytest.skip("; ".join(problems))
    return build_engine()


def test_live_search_returns_list(engine):
    results = asyncio.run(engine.search("the"))
    assert isinstance(results, list)
    for r in results:
        assert r.source in engine.source_names
        assert r.url


@pytest.mark.parametrize("source", ["google-drive", "gmail"])
def test_live_search_single_source(engine, source):
    if source not in engine.source_names:
        pytest.skip(f"{source} not connected")
    results = asyncio.run(engine.search_with_sources("the", [source]))
    assert all(r.source == source for r in results)


def test_live_query_with_quotes_does_not_break_drive(engine):
    results = asyncio.run(engine.search_with_sources("bob's \\ notes", ["google-drive"]))
    assert isinstance(results, list)
