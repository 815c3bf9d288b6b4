"""Request orchestrator: cache, de-duplication and a bounded queue in front of httpx.

A read first consults the cache, then joins an identical outstanding read,
and only then takes a queue slot for a network call. Writes skip the cache
and the registry, and invalidate cache patterns once they succeed.

Every call accepts an optional ``signal`` (an ``asyncio.Event``). Setting it
aborts the call with ``RequestCancelled``. For a shared read, the caller that
started the exchange owns it: its signal cancels the exchange for everyone,
while a later joiner's signal only detaches that joiner.
"""

import asyncio

import httpx
import structlog

from storefront.cache import DEFAULT_TTL, CacheStore
from storefront.errors import (
    AuthenticationRequired,
    ConnectionUnreachable,
    RemoteServerError,
    RequestCancelled,
    error_from_response,
)
from storefront.inflight import InFlightRegistry
from storefront.limiter import DEFAULT_MAX_CONCURRENT, RequestQueue
from storefront.storage import TOKEN_KEY

logger = structlog.get_logger(__name__)


async def until_aborted(awaitable, signal, on_abort=None):
    """Await ``awaitable`` unless ``signal`` is set first.

    On abort the pending work is cancelled, ``on_abort`` runs, and
    ``RequestCancelled`` is raised once the work has unwound.
    """
    work = asyncio.ensure_future(awaitable)
    if signal is None:
        return await work

    if not signal.is_set():
        aborted = asyncio.ensure_future(signal.wait())
        try:
            await asyncio.wait({work, aborted}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            work.cancel()
            raise
        finally:
            aborted.cancel()

        if work.done():
            return work.result()

    work.cancel()
    if on_abort is not None:
        on_abort()
    await asyncio.wait({work})
    raise RequestCancelled()


class RequestOrchestrator:
    def __init__(
        self,
        base_url,
        storage,
        *,
        transport=None,
        cache=None,
        inflight=None,
        limiter=None,
        max_concurrent=DEFAULT_MAX_CONCURRENT,
    ):
        self.base_url = base_url.rstrip("/")
        self.storage = storage
        self.cache = cache if cache is not None else CacheStore()
        self.inflight = inflight if inflight is not None else InFlightRegistry()
        self.limiter = limiter if limiter is not None else RequestQueue(max_concurrent)
        self._client = httpx.AsyncClient(base_url=self.base_url, transport=transport)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    async def aclose(self):
        await self._client.aclose()

    @property
    def server_root(self):
        """Base URL without the ``/api`` suffix; uploaded files live under it."""
        return self.base_url[: -len("/api")] if self.base_url.endswith("/api") else self.base_url

    # -------------------------------------------------------------------
    # Token
    # -------------------------------------------------------------------
    @property
    def token(self):
        return self.storage.get(TOKEN_KEY)

    def _headers(self, auth_required, json_body=True):
        token = self.token
        if auth_required and not token:
            raise AuthenticationRequired()

        headers = {"Content-Type": "application/json"} if json_body else {}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    # -------------------------------------------------------------------
    # Calls
    # -------------------------------------------------------------------
    async def read(self, path, *, cache_key=None, ttl=DEFAULT_TTL, params=None, signal=None, auth_required=False):
        headers = self._headers(auth_required)
        if signal is not None and signal.is_set():
            raise RequestCancelled()

        if cache_key is None:
            return await until_aborted(
                self.limiter.schedule(lambda: self._send("GET", path, headers=headers, params=params)),
                signal,
            )

        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        mark = self.cache.mark()

        async def exchange():
            try:
                data = await self.limiter.schedule(lambda: self._send("GET", path, headers=headers, params=params))
            except asyncio.CancelledError:
                raise RequestCancelled() from None
            if self.cache.invalidated_since(cache_key, mark):
                logger.debug("cache_store_skipped", key=cache_key)
            else:
                self.cache.set(cache_key, data, ttl)
            return data

        task, created = self.inflight.task_for(cache_key, exchange)
        try:
            return await until_aborted(asyncio.shield(task), signal, on_abort=task.cancel if created else None)
        except RequestCancelled:
            if created:
                # Let the shared exchange release its queue slot and registry entry.
                await asyncio.wait({task})
            raise
        except asyncio.CancelledError:
            # The shared exchange was cancelled before it started; our own task was not.
            if task.cancelled() and not asyncio.current_task().cancelling():
                raise RequestCancelled() from None
            raise

    async def write(self, method, path, *, json=None, files=None, invalidate=(), signal=None, auth_required=False):
        headers = self._headers(auth_required, json_body=files is None)

        data = await until_aborted(
            self.limiter.schedule(lambda: self._send(method, path, headers=headers, json=json, files=files)),
            signal,
        )
        for pattern in invalidate:
            self.cache.invalidate(pattern)
        return data

    def invalidate(self, pattern=None):
        return self.cache.invalidate(pattern)

    async def _send(self, method, path, *, headers, params=None, json=None, files=None):
        try:
            response = await self._client.request(method, path, headers=headers, params=params, json=json, files=files)
        except httpx.TransportError as exc:
            logger.warning("request_unreachable", method=method, path=path, error=str(exc))
            raise ConnectionUnreachable.for_base_url(self.base_url) from exc

        try:
            body = response.json()
        except ValueError:
            body = None

        if response.is_success:
            if body is None:
                raise RemoteServerError(status_code=response.status_code)
            return body

        logger.debug("request_failed", method=method, path=path, status=response.status_code)
        raise error_from_response(response.status_code, body)
