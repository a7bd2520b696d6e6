import json

import pytest

from pkb.core.config import Config
from pkb.core.logger import PkbLogger


def test_load_defaults(monkeypatch):
    for name in ("PKB_SERVER_ADDR", "PKB_TOKEN_PATH", "PKB_OAUTH_PORT", "PKB_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)

    cfg = Config.load()

    assert cfg.server_addr == ":8080"
    assert cfg.token_path.name == "token.json"
    assert cfg.oauth_port == 6999
    assert cfg.log_level == "INFO"


def test_load_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("PKB_SERVER_ADDR", "127.0.0.1:9000")
    monkeypatch.setenv("PKB_GOOGLE_CLIENT_ID", "id")
    monkeypatch.setenv("PKB_GOOGLE_CLIENT_SECRET", "secret")
    monkeypatch.setenv("PKB_TOKEN_PATH", str(tmp_path / "tok.json"))
    monkeypatch.setenv("PKB_LOG_LEVEL", "debug")

    cfg = Config.load()

    assert cfg.server_host_port() == ("127.0.0.1", 9000)
    assert cfg.has_google_credentials
    assert cfg.token_path == tmp_path / "tok.json"
    assert cfg.log_level == "DEBUG"


@pytest.mark.parametrize(
    ("addr", "expected"),
    [(":8080", ("0.0.0.0", 8080)), ("localhost:1234", ("localhost", 1234))],
)
def test_server_host_port(addr, expected):
    cfg = Config.load()
    cfg.server_addr = addr
    assert cfg.server_host_port() == expected


def test_validate_reports_every_problem(tmp_path):
    cfg = Config.load()
    cfg.google_client_id = ""
    cfg.google_client_secret = ""
    cfg.token_path = tmp_path / "missing.json"
    cfg.server_addr = ":http"

    errors = cfg.validate()

    assert len(errors) == 3
    assert any("PKB_GOOGLE_CLIENT_ID" in e for e in errors)
    assert any("missing.json" in e for e in errors)
    assert any("PKB_SERVER_ADDR" in e for e in errors)


def test_logger_writes_jsonl_events(tmp_path):
    log = PkbLogger()
    log.log_file = tmp_path / "pkb.log"

    log.search_started("budget", ["google-drive", "gmail"])
    log.connector_failed("gmail", RuntimeError("connection refused"))
    log.search_finished("budget", 3, ["gmail"], 0.25)

    events = [json.loads(line) for line in log.log_file.read_text().splitlines()]
    assert [e["event_type"] for e in events] == ["SEARCH_START", "CONNECTOR_FAILED", "SEARCH_DONE"]
    assert events[1]["data"]["source"] == "gmail"
    assert events[2]["data"]["failed_sources"] == ["gmail"]
    assert events[2]["data"]["duration_ms"] == 250.0
