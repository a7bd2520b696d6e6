"""Configuration from environment variables (.env)."""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def _resolve(path: str, root: Path) -> Path:
    p = Path(path).expanduser()
    return p if p.is_absolute() else root / p


@dataclass
class Config:
    project_root: Path
    logs_dir: Path
    log_level: str
    server_addr: str
    google_client_id: str
    google_client_secret: str
    token_path: Path
    oauth_port: int

    @classmethod
    def load(cls) -> "Config":
        project_root = Path(__file__).parent.parent.parent
        return cls(
            project_root=project_root,
            logs_dir=_resolve(os.getenv("PKB_LOGS_DIR", "logs"), project_root),
            log_level=os.getenv("PKB_LOG_LEVEL", "INFO").upper(),
            server_addr=os.getenv("PKB_SERVER_ADDR", ":8080"),
            google_client_id=os.getenv("PKB_GOOGLE_CLIENT_ID", ""),
            google_client_secret=os.getenv("PKB_GOOGLE_CLIENT_SECRET", ""),
            token_path=Path(os.getenv("PKB_TOKEN_PATH", "token.json")).expanduser(),
            oauth_port=int(os.getenv("PKB_OAUTH_PORT", "6999")),
        )

    @property
    def has_google_credentials(self) -> bool:
        return bool(self.google_client_id.strip() and self.google_client_secret.strip())

    def server_host_port(self) -> tuple[str, int]:
        """Split PKB_SERVER_ADDR (":8080", "127.0.0.1:9000") into host and port."""
        host, _, port = self.server_addr.rpartition(":")
        return (host or "0.0.0.0"), int(port or "8080")

    def validate(self) -> list[str]:
        errors = []
        if not self.has_google_credentials:
            errors.append("PKB_GOOGLE_CLIENT_ID and PKB_GOOGLE_CLIENT_SECRET must be set")
        if not self.token_path.exists():
            errors.append(f"OAuth token not found: {self.token_path} (run: pkb auth)")
        try:
            self.server_host_port()
        except ValueError:
            errors.append(f"Invalid PKB_SERVER_ADDR: {self.server_addr!r}")
        return errors


config = Config.load()
