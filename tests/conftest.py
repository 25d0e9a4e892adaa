import asyncio
import contextlib
import logging
import os
import socket
import struct
from collections.abc import AsyncIterator, Callable

import aiohttp
import httpx
import multidict
import pytest
from _pytest.fixtures import SubRequest

import aio_fetch

logging.basicConfig(level="DEBUG")


class FakeTransport(aio_fetch.Transport):
    """Answers by url: status, delay in seconds and body"""

    __slots__ = ("_responses", "sent")

    def __init__(self, responses: dict[str, tuple[int, float, str | None]] | None = None) -> None:
        self._responses = responses or {}
        self.sent: list[aio_fetch.Request] = []

    async def send(self, request: aio_fetch.Request) -> aio_fetch.ClosableResponse:
        self.sent.append(request)
        response = self._responses.get(str(request.url))
        if response is None:
            raise RuntimeError(f"No response for {request.url}")

        status, delay_seconds, body = response
        await asyncio.sleep(delay_seconds)
        headers = multidict.CIMultiDict[str]()
        headers["X-Url"] = str(request.url)
        return aio_fetch.EmptyResponse(status=status, headers=multidict.CIMultiDictProxy[str](headers), text=body)


class FakeFileSystem(aio_fetch.FileSystem):
    """Local filesystem which fails chosen operations for chosen paths"""

    __slots__ = ("_errors", "_file_system", "calls")

    def __init__(self, errors: dict[tuple[str, str], OSError] | None = None) -> None:
        self._errors = errors or {}
        self._file_system = aio_fetch.LocalFileSystem()
        self.calls: list[tuple[str, str]] = []

    def _check(self, operation: str, path: str) -> None:
        self.calls.append((operation, path))
        error = self._errors.get((operation, path))
        if error is not None:
            raise error

    async def lstat(self, path: str) -> os.stat_result:
        self._check("lstat", path)
        return await self._file_system.lstat(path)

    async def stat(self, path: str) -> os.stat_result:
        self._check("stat", path)
        return await self._file_system.stat(path)

    async def readlink(self, path: str) -> str:
        self._check("readlink", path)
        return await self._file_system.readlink(path)

    async def open(self, path: str) -> aio_fetch.FileReader:
        self._check("open", path)
        reader = await self._file_system.open(path)
        error = self._errors.get(("read", path))
        return reader if error is None else FailingFileReader(reader, error)


class FailingFileReader(aio_fetch.FileReader):
    __slots__ = ("_reader", "_error")

    def __init__(self, reader: aio_fetch.FileReader, error: OSError) -> None:
        self._reader = reader
        self._error = error

    async def read(self, size: int) -> bytes:
        raise self._error

    async def close(self) -> None:
        await self._reader.close()


@pytest.fixture(scope="session")
def unused_port() -> Callable[[], int]:
    def f() -> int:
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            s.bind(("127.0.0.1", 0))
            return s.getsockname()[1]

    return f


@pytest.fixture(params=("aiohttp", "httpx"))
async def transport(request: SubRequest) -> AsyncIterator[aio_fetch.Transport]:
    if request.param == "aiohttp":
        async with aiohttp.ClientSession() as client_session:
            yield aio_fetch.AioHttpTransport(client_session)
    elif request.param == "httpx":
        async with httpx.AsyncClient() as async_client:
            yield aio_fetch.HttpxTransport(async_client)
    else:
        raise ValueError(f"Unknown transport {request.param}")


@pytest.fixture
async def resetting_server_factory() -> AsyncIterator[Callable[[int], contextlib.AbstractAsyncContextManager[None]]]:
    @contextlib.asynccontextmanager
    async def run_server(port: int) -> AsyncIterator[None]:
        async def handle(reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
            try:
                await reader.read(1)
                sock = writer.get_extra_info("socket")
                assert sock
                sock.setsockopt(socket.SOL_SOCKET, socket.SO_LINGER, struct.pack("ii", 1, 0))
            finally:
                writer.close()

        server_handle = await asyncio.start_server(handle, "127.0.0.1", port)

        yield

        server_handle.close()
        await server_handle.wait_closed()

    yield run_server


@pytest.fixture
async def truncating_server_factory() -> AsyncIterator[Callable[[int], contextlib.AbstractAsyncContextManager[None]]]:
    @contextlib.asynccontextmanager
    async def run_server(port: int) -> AsyncIterator[None]:
        async def handle(reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
            try:
                await reader.readuntil(b"\r\n\r\n")
                writer.write(b"HTTP/1.1 200 OK\r\nContent-Type: text/plain\r\nContent-Length: 100\r\n\r\npartial")
                await writer.drain()
            finally:
                writer.close()

        server_handle = await asyncio.start_server(handle, "127.0.0.1", port)

        yield

        server_handle.close()
        await server_handle.wait_closed()

    yield run_server
