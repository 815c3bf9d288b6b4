"""Client settings, read from the environment."""

import os
from dataclasses import dataclass
from pathlib import Path

from storefront.limiter import DEFAULT_MAX_CONCURRENT

DEFAULT_API_URL = "http://localhost:5001/api"
DEFAULT_STORAGE_PATH = "~/.localmart/storage.json"


def _get_env(key, default):
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return default
    return value.strip()


@dataclass(frozen=True)
class Settings:
    api_url: str = DEFAULT_API_URL
    max_concurrent: int = DEFAULT_MAX_CONCURRENT
    storage_path: Path = Path(DEFAULT_STORAGE_PATH).expanduser()

    @classmethod
    def from_env(cls):
        return cls(
            api_url=_get_env("LOCALMART_API_URL", DEFAULT_API_URL).rstrip("/"),
            max_concurrent=int(_get_env("LOCALMART_MAX_CONCURRENT", str(DEFAULT_MAX_CONCURRENT))),
            storage_path=Path(_get_env("LOCALMART_STORAGE_PATH", DEFAULT_STORAGE_PATH)).expanduser(),
        )
