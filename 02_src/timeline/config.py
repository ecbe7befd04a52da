"""Project-level configuration and path helpers."""

import os
from dataclasses import dataclass
from pathlib import Path

from .errors import ConfigurationError

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
LOGS_DIR = PROJECT_ROOT / "04_logs"
DEFAULT_LOG_PATH = LOGS_DIR / "app.log"

DEFAULT_HTTP_TIMEOUT = 10.0
DEFAULT_API_PORT = 7531


@dataclass(frozen=True)
class Settings:
    """Runtime settings read from the environment."""

    api_key: str
    endpoint: str
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    api_host: str = "0.0.0.0"
    api_port: int = DEFAULT_API_PORT
    cors_allow_origins: tuple[str, ...] = ("*",)

    @property
    def base_url(self) -> str:
        """Upstream API base URL derived from the endpoint identifier."""
        if self.endpoint.startswith(("http://", "https://")):
            return self.endpoint.rstrip("/")
        return f"https://{self.endpoint}.web.tmprl.cloud"


def _require(name: str) -> str:
    value = os.getenv(name, "").strip()
    if not value:
        raise ConfigurationError(f"{name} environment variable not set")
    return value


def _float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}")


def load_settings() -> Settings:
    """
    Build Settings from environment variables.

    Raises:
        ConfigurationError: if TEMPORAL_API_KEY or TEMPORAL_ENDPOINT is
            missing, or a numeric variable cannot be parsed.
    """
    api_key = _require("TEMPORAL_API_KEY")
    endpoint = _require("TEMPORAL_ENDPOINT")

    origins = os.getenv("CORS_ALLOW_ORIGINS", "*")
    raw_port = os.getenv("API_PORT", str(DEFAULT_API_PORT))
    try:
        api_port = int(raw_port)
    except ValueError:
        raise ConfigurationError(f"API_PORT must be an integer, got {raw_port!r}")

    return Settings(
        api_key=api_key,
        endpoint=endpoint,
        http_timeout=_float("TEMPORAL_HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT),
        api_host=os.getenv("API_HOST", "0.0.0.0"),
        api_port=api_port,
        cors_allow_origins=tuple(o.strip() for o in origins.split(",") if o.strip()),
    )
