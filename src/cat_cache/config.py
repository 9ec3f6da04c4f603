import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

STORAGE_BACKENDS = ("file", "redis")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class Settings:
    """Application settings.

    Built once at startup (usually via ``Settings.from_env()``) and passed
    explicitly to the app factory, repositories and the upstream fetcher.
    """

    # API
    api_host: str = "127.0.0.1"
    api_port: int = 8080

    # Storage
    cache_dir: Path = Path("./cache")
    cache_file_extension: str = ".jpg"
    storage_backend: str = "file"

    # Redis (only used when storage_backend == "redis")
    redis_url: str = "redis://localhost:6379"
    redis_password: str | None = None
    redis_key_prefix: str = "cat_cache"

    # Upstream
    upstream_base_url: str = "https://http.cat"
    upstream_timeout: float = 10.0

    # Responses
    content_type: str = "image/jpeg"

    # Logging
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables (and a ``.env`` file)."""
        return cls(
            api_host=os.getenv("API_HOST", "127.0.0.1"),
            api_port=int(os.getenv("API_PORT", "8080")),
            cache_dir=Path(os.getenv("CACHE_DIR", "./cache")),
            cache_file_extension=os.getenv("CACHE_FILE_EXTENSION", ".jpg"),
            storage_backend=os.getenv("STORAGE_BACKEND", "file").lower(),
            redis_url=os.getenv("REDIS_URL", "redis://localhost:6379"),
            redis_password=os.getenv("REDIS_PASSWORD"),
            redis_key_prefix=os.getenv("REDIS_KEY_PREFIX", "cat_cache"),
            upstream_base_url=os.getenv("UPSTREAM_BASE_URL", "https://http.cat"),
            upstream_timeout=float(os.getenv("UPSTREAM_TIMEOUT", "10.0")),
            content_type=os.getenv("CONTENT_TYPE", "image/jpeg"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    def with_overrides(self, **overrides) -> "Settings":
        """Return a copy with the given non-None fields replaced."""
        changes = {name: value for name, value in overrides.items() if value is not None}
        return replace(self, **changes)

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if not 0 < self.api_port < 65536:
            raise ValueError(f"API_PORT must be between 1 and 65535, got {self.api_port}")

        if self.upstream_timeout <= 0:
            raise ValueError("UPSTREAM_TIMEOUT must be greater than 0")

        if self.storage_backend not in STORAGE_BACKENDS:
            raise ValueError(
                f"STORAGE_BACKEND must be one of {list(STORAGE_BACKENDS)}, "
                f"got {self.storage_backend!r}"
            )

        # Accept plain strings for cache_dir (CLI, tests)
        if not isinstance(self.cache_dir, Path):
            object.__setattr__(self, "cache_dir", Path(self.cache_dir))


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once at startup."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT, force=True)
