"""In-memory stand-ins for the parts of aiohttp the probes touch."""

import asyncio


class FakeStream:
    def __init__(self, chunks=(), error=None):
        self._chunks = list(chunks)
        self._error = error

    async def read(self, n=-1):
        if self._chunks:
            return self._chunks.pop(0)
        if self._error is not None:
            raise self._error
        return b""


class FakeResponse:
    def __init__(self, status=200, headers=None, chunks=(), stream_error=None,
                 payload=None, json_error=None):
        self.status = status
        self.headers = headers or {}
        self.content = FakeStream(chunks, stream_error)
        self._payload = payload
        self._json_error = json_error
        self.released = False

    @property
    def ok(self):
        return self.status < 400

    def release(self):
        self.released = True

    async def json(self, content_type="application/json"):
        if self._json_error is not None:
            raise self._json_error
        return self._payload

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.release()


class _Request:
    """Awaitable and async-context-manager, like aiohttp's request helper."""

    def __init__(self, http, item):
        self._http = http
        self._item = item
        self._resp = None

    async def _resolve(self):
        if self._http.delay:
            await asyncio.sleep(self._http.delay)
        if isinstance(self._item, BaseException):
            raise self._item
        return self._item

    def __await__(self):
        return self._resolve().__await__()

    async def __aenter__(self):
        self._resp = await self._resolve()
        return self._resp

    async def __aexit__(self, exc_type, exc, tb):
        if self._resp is not None:
            self._resp.release()


class FakeHttp:
    """
    Serve queued responses (or exceptions) in order.

    The last queued item is repeated once the queue runs dry.
    """

    def __init__(self, *items, delay=0.0):
        self._items = list(items) or [FakeResponse()]
        self.delay = delay
        self.calls = []

    def _next(self):
        if len(self._items) > 1:
            return self._items.pop(0)
        return self._items[0]

    def get(self, url, **kwargs):
        self.calls.append(("GET", url, kwargs))
        return _Request(self, self._next())

    def head(self, url, **kwargs):
        self.calls.append(("HEAD", url, kwargs))
        return _Request(self, self._next())
