"""
Service configuration.

``Settings`` reads its values from environment variables, with a default
for every field, so the service runs with no configuration at all.
"""

import os
from dataclasses import dataclass, field
from typing import List


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


def _env_list(name: str, default: str) -> List[str]:
    return [item.strip() for item in os.getenv(name, default).split(",") if item.strip()]


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = field(default_factory=lambda: os.getenv("PROJECT_NAME", "Contoso Pets Products API"))
    api_version: str = field(default_factory=lambda: os.getenv("API_VERSION", "1.0.0"))
    # Routes are mounted under this prefix, e.g. /api/products
    api_prefix: str = field(default_factory=lambda: os.getenv("API_PREFIX", "/api"))
    host: str = field(default_factory=lambda: os.getenv("HOST", "127.0.0.1"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8085")))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    log_file: str = field(default_factory=lambda: os.getenv("LOG_FILE", ""))
    # Insert the two starter products when the store is empty
    seed_data: bool = field(default_factory=lambda: _env_bool("SEED_DATA", "true"))
    cors_origins: List[str] = field(default_factory=lambda: _env_list("CORS_ORIGINS", "*"))

    def __post_init__(self) -> None:
        prefix = self.api_prefix.strip()
        if prefix and not prefix.startswith("/"):
            prefix = "/" + prefix
        self.api_prefix = prefix.rstrip("/")

    @classmethod
    def from_env(cls) -> "Settings":
        """Read the environment as it is now."""
        return cls()
