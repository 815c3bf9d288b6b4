"""Durable key/value storage for the client: the session token and the cart.

Values must be JSON serializable. A missing, unreadable or corrupt file reads
as empty storage.
"""

import json
from pathlib import Path

import structlog

logger = structlog.get_logger(__name__)

TOKEN_KEY = "auth_token"


class MemoryStorage:
    def __init__(self, initial=None):
        self._data = dict(initial or {})

    def get(self, key, default=None):
        return self._data.get(key, default)

    def set(self, key, value):
        self._data[key] = value

    def remove(self, key):
        self._data.pop(key, None)

    def __contains__(self, key):
        return key in self._data


class FileStorage(MemoryStorage):
    """A JSON object file, rewritten on every change."""

    def __init__(self, path):
        self.path = Path(path)
        super().__init__(self._read())

    def _read(self):
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as exc:
            logger.warning("storage_unreadable", path=str(self.path), error=str(exc))
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(self._data), encoding="utf-8")
        tmp.replace(self.path)

    def set(self, key, value):
        super().set(key, value)
        self._write()

    def remove(self, key):
        super().remove(key)
        self._write()
