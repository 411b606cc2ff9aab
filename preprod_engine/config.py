from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

DEFAULT_API_BASE_URL = "http://localhost:3000"
DEFAULT_HTTP_TIMEOUT = 120.0  # seconds
DEFAULT_DATA_DIR = Path("data")


@dataclass(frozen=True)
class Settings:
    api_base_url: str
    http_timeout: float
    data_dir: Path
    log_level: str
    verify_tls: bool = True

    @property
    def inventory_dir(self) -> Path:
        return self.data_dir / "inventory"

    @property
    def documents_dir(self) -> Path:
        return self.data_dir / "projects"


def load_settings() -> Settings:
    """Read settings from the environment, after loading a local .env file."""
    load_dotenv(find_dotenv(usecwd=True))
    timeout = os.getenv("PREPROD_HTTP_TIMEOUT")
    try:
        http_timeout = float(timeout) if timeout else DEFAULT_HTTP_TIMEOUT
    except ValueError as exc:
        raise ValueError(f"PREPROD_HTTP_TIMEOUT must be a number, got {timeout!r}") from exc
    return Settings(
        api_base_url=os.getenv("PREPROD_API_BASE_URL", DEFAULT_API_BASE_URL).rstrip("/"),
        http_timeout=http_timeout,
        data_dir=Path(os.getenv("PREPROD_DATA_DIR", str(DEFAULT_DATA_DIR))),
        log_level=os.getenv("PREPROD_LOG_LEVEL", "INFO").upper(),
        verify_tls=get_env_flag("PREPROD_VERIFY_TLS", default=True),
    )


def get_env_flag(name: str, default: bool = False) -> bool:
    """Read a boolean flag from environment variables."""
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}
