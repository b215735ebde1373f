import contextlib
from collections.abc import Awaitable, Callable
from typing import Any, Union

import httpx

# A transport is any async callable (url, method, headers, body) -> TransportResponse.
# The engine only touches `.status`, `.headers.get(name)` and `await .text()`, so a
# test double can return any object with that shape.
Transport = Callable[
    [str, str, dict[str, str], Union[str, None]], Awaitable["TransportResponse"]
]


class TransportResponse:
    """Fully-read HTTP response handed back to the engine."""

    def __init__(self, status: int, headers: Any = None, body: str = ""):
        self.status = status
        # case-insensitive lookup
        self.headers = httpx.Headers(headers or {})
        self._body = body

    async def text(self) -> str:
        return self._body

    def __repr__(self) -> str:
        return f"TransportResponse(status={self.status})"


# ---------- httpx (default) ----------
class HttpxTransport:
    def __init__(self, client: Union[httpx.AsyncClient, None] = None, timeout: float = 30.0):
        self.client = client
        self.timeout = timeout
        # only close what we opened
        self._own_client = client is None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()
        return False

    async def __call__(
        self, url: str, method: str, headers: dict[str, str], body: Union[str, None]
    ) -> TransportResponse:
        client = self.client
        if client is None:
            self.client = client = httpx.AsyncClient(timeout=self.timeout)
        resp = await client.request(method, url, headers=headers, content=body)
        return TransportResponse(resp.status_code, resp.headers, resp.text)

    async def aclose(self):
        if self._own_client and self.client is not None:
            with contextlib.suppress(Exception):
                await self.client.aclose()
            self.client = None


# ---------- aiohttp ----------
class AiohttpTransport:
    def __init__(self, session=None):
        self.session = session
        self._own_session = session is None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()
        return False

    async def __call__(
        self, url: str, method: str, headers: dict[str, str], body: Union[str, None]
    ) -> TransportResponse:
        if self.session is None:
            import aiohttp  # noqa: PLC0415

            self.session = aiohttp.ClientSession()
        async with self.session.request(method, url, headers=headers, data=body) as resp:
            text = await resp.text(errors="replace")
            return TransportResponse(resp.status, list(resp.headers.items()), text)

    async def aclose(self):
        if self._own_session and self.session is not None:
            with contextlib.suppress(Exception):
                await self.session.close()
            self.session = None
