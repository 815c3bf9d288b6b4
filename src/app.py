"""LocalMart FastAPI application.

Single-domain web server that processes commands synchronously via HTTP.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 5001 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV selects the config overlay from domain.toml.
from marketplace.domain import marketplace  # noqa: E402

marketplace.init()

from marketplace.api.app import create_app  # noqa: E402

app = create_app()
