"""Runtime settings for the marketplace API, read from the environment.

Protean's own configuration (providers, processing mode) lives in
``domain.toml`` next to the domain module.
"""

import os
from dataclasses import dataclass
from pathlib import Path


def _get_env(*keys, default=None):
    for key in keys:
        value = os.getenv(key)
        if value is not None and value.strip() != "":
            return value.strip()
    return default


@dataclass(frozen=True)
class Settings:
    upload_dir: Path
    frontend_url: str
    max_upload_bytes: int
    environment: str

    @classmethod
    def from_env(cls):
        return cls(
            upload_dir=Path(_get_env("UPLOAD_DIR", default="uploads")),
            frontend_url=_get_env("FRONTEND_URL", default="http://localhost:5173"),
            max_upload_bytes=int(_get_env("MAX_UPLOAD_BYTES", default=str(5 * 1024 * 1024))),
            environment=_get_env("ENVIRONMENT", "PROTEAN_ENV", default="development"),
        )


settings = Settings.from_env()
