"""Structured logging: console plus a JSONL event file."""

import json
import logging
import os
import sys
import threading
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, TextIO

from pkb.core.config import config


def _format_duration(seconds: float) -> str:
    if seconds < 0:
        return "0s"
    if seconds >= 60:
        m = int(seconds // 60)
        s = seconds % 60
        return f"{m}m {s:.0f}s" if s >= 1 else f"{m}m"
    if seconds >= 0.05:
        return f"{seconds:.1f}s"
    if seconds > 0:
        return "<0.1s"
    return "0s"


def _use_color() -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    try:
        return sys.stderr.isatty()
    except Exception:
        return False


def _c(role: str) -> str:
    if not _use_color():
        return ""
    codes = {
        "source": "\033[38;5;81m",
        "ok": "\033[38;5;78m",
        "fail": "\033[38;5;203m",
        "duration": "\033[38;5;221m",
    }
    return codes.get(role, "")


def _reset() -> str:
    return "\033[0m" if _use_color() else ""


@dataclass
class LogEvent:
    event_type: str
    timestamp: str
    data: dict[str, Any]

    def to_dict(self) -> dict:
        return asdict(self)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), default=str)


class PkbLogger:
    def __init__(self):
        self.log_file = config.logs_dir / "pkb.log"
        self._file_lock = threading.Lock()
        self._log_file_handle: TextIO | None = None
        self._setup_console_logger()

    def _setup_console_logger(self):
        self.console = logging.getLogger("pkb")
        self.console.setLevel(logging.DEBUG)
        self._console_formatter = logging.Formatter(
            "%(asctime)s │ %(message)s", datefmt="%H:%M:%S"
        )
        if not self.console.handlers:
            handler = logging.StreamHandler()
            handler.setLevel(getattr(logging, config.log_level, logging.INFO))
            handler.setFormatter(self._console_formatter)
            self.console.addHandler(handler)
        # googleapiclient is chatty at INFO (discovery cache warnings)
        logging.getLogger("googleapiclient.discovery_cache").setLevel(logging.ERROR)

    def _file(self) -> TextIO:
        if self._log_file_handle is None:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)
            self._log_file_handle = open(self.log_file, "a", encoding="utf-8")
        return self._log_file_handle

    def log_event(self, event: LogEvent) -> None:
        with self._file_lock:
            handle = self._file()
            handle.write(event.to_json() + "\n")
            handle.flush()

    def _timestamp(self) -> str:
        return datetime.now().isoformat()

    def search_started(self, query: str, sources: list[str]) -> None:
        self.log_event(
            LogEvent(
                event_type="SEARCH_START",
                timestamp=self._timestamp(),
                data={"query": query[:500], "sources": sources},
            )
        )
        names = ", ".join(sources) if sources else "none"
        self.console.debug(f"🔎 Search {query[:80]!r} → {_c('source')}{names}{_reset()}")

    def search_finished(
        self,
        query: str,
        result_count: int,
        failed: list[str],
        duration_seconds: float,
    ) -> None:
        self.log_event(
            LogEvent(
                event_type="SEARCH_DONE",
                timestamp=self._timestamp(),
                data={
                    "query": query[:500],
                    "results": result_count,
                    "failed_sources": failed,
                    "duration_ms": round(duration_seconds * 1000, 1),
                },
            )
        )
        status = f"{_c('fail')}[{len(failed)} failed]" if failed else f"{_c('ok')}[ok]"
        self.console.debug(
            f"   Done {status}{_reset()} {result_count} results "
            f"{_c('duration')}{_format_duration(duration_seconds)}{_reset()}"
        )

    def connector_failed(self, source: str, error: BaseException) -> None:
        reason = str(error).strip().replace("\n", " ")
        self.log_event(
            LogEvent(
                event_type="CONNECTOR_FAILED",
                timestamp=self._timestamp(),
                data={"source": source, "error": reason[:500], "type": type(error).__name__},
            )
        )
        self.console.warning(f"⚠️ Connector {source} failed: {reason[:120]}")

    def error(self, message: str, *args, exception: Exception | None = None, **kwargs):
        event = LogEvent(
            event_type="ERROR",
            timestamp=self._timestamp(),
            data={
                "message": message,
                "exception": str(exception) if exception else None,
            },
        )
        self.log_event(event)

        allowed = {"exc_info", "stack_info", "stacklevel", "extra"}
        log_kwargs = {k: v for k, v in kwargs.items() if k in allowed}
        if exception and "exc_info" not in log_kwargs:
            log_kwargs["exc_info"] = exception

        self.console.error(f"❌ Error: {message}", *args, **log_kwargs)

    def info(self, message: str, *args, **kwargs):
        allowed = {"exc_info", "stack_info", "stacklevel", "extra"}
        log_kwargs = {k: v for k, v in kwargs.items() if k in allowed}
        self.console.info(message, *args, **log_kwargs)

    def warning(self, message: str, *args, **kwargs):
        event = LogEvent(
            event_type="WARNING",
            timestamp=self._timestamp(),
            data={"message": message[:500]},
        )
        self.log_event(event)

        allowed = {"exc_info", "stack_info", "stacklevel", "extra"}
        log_kwargs = {k: v for k, v in kwargs.items() if k in allowed}
        self.console.warning(f"⚠️ {message}", *args, **log_kwargs)

    def debug(self, message: str, *args, **kwargs):
        allowed = {"exc_info", "stack_info", "stacklevel", "extra"}
        log_kwargs = {k: v for k, v in kwargs.items() if k in allowed}
        self.console.debug(message, *args, **log_kwargs)


logger = PkbLogger()
