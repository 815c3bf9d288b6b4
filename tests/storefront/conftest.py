import asyncio

import httpx
import pytest
import pytest_asyncio

from storefront.api import StorefrontAPI
from storefront.cache import CacheStore
from storefront.orchestrator import RequestOrchestrator
from storefront.storage import TOKEN_KEY, MemoryStorage

BASE_URL = "http://shop.test/api"


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class FakeBackend:
    """Canned JSON responses keyed by ``(method, path)``, with an optional gate.

    While ``gate`` is an unset ``asyncio.Event`` every request parks inside the
    handler, which lets tests observe concurrency and abort in-flight calls.
    """

    def __init__(self):
        self.routes = {}
        self.calls = []
        self.gate = None
        self.in_progress = 0
        self.max_in_progress = 0

    def respond(self, method, path, body=None, status=200):
        self.routes[(method, f"/api{path}")] = (status, body if body is not None else {})

    def respond_with(self, method, path, func):
        self.routes[(method, f"/api{path}")] = func

    def hold(self):
        self.gate = asyncio.Event()
        return self.gate

    def calls_to(self, method, path):
        return [call for call in self.calls if call.method == method and call.url.path == f"/api{path}"]

    async def handler(self, request):
        self.calls.append(request)
        self.in_progress += 1
        self.max_in_progress = max(self.max_in_progress, self.in_progress)
        try:
            if self.gate is not None:
                await self.gate.wait()
            route = self.routes.get((request.method, request.url.path))
            if route is None:
                return httpx.Response(404, json={"message": "Route not found"})
            if callable(route):
                return route(request)
            status, body = route
            return httpx.Response(status, json=body)
        finally:
            self.in_progress -= 1

    def transport(self):
        return httpx.MockTransport(self.handler)


async def settle(predicate=None, rounds=50):
    """Yield to the event loop until ``predicate()`` holds (or just a few times)."""
    for _ in range(rounds):
        if predicate is not None and predicate():
            return
        await asyncio.sleep(0)
    if predicate is not None:
        assert predicate(), "condition not reached"


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def backend():
    return FakeBackend()


@pytest.fixture()
def storage():
    return MemoryStorage()


@pytest.fixture()
def signed_in(storage):
    storage.set(TOKEN_KEY, "token-123")
    return storage


@pytest_asyncio.fixture()
async def orchestrator(backend, storage, clock):
    async with RequestOrchestrator(
        BASE_URL,
        storage,
        transport=backend.transport(),
        cache=CacheStore(clock=clock),
    ) as instance:
        yield instance


@pytest.fixture()
def api(orchestrator):
    return StorefrontAPI(orchestrator)


@pytest.fixture()
def settle_loop():
    return settle
