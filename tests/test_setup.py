import pathlib

import pytest

import aio_fetch

from .conftest import FakeTransport


async def test_setup_with_defaults(tmp_path: pathlib.Path) -> None:
    path = tmp_path / "hello.txt"
    path.write_text("hello")
    client = aio_fetch.setup(network_transport=FakeTransport({"http://service.com/": (200, 0, "world")}))

    result = await client.fetch(path.as_uri())
    assert result.status == 200
    assert result.headers["Content-Type"] == "text/plain; charset=UTF-8"
    assert result.body == "hello"

    results = await client.fetch_all([path.as_uri(), "http://service.com/"], method="HEAD")
    assert results.statuses == (200, 200)
    assert results.bodies == (None, "world")


async def test_setup_without_content_type_resolver(tmp_path: pathlib.Path) -> None:
    path = tmp_path / "hello.txt"
    path.write_text("hello")
    client = aio_fetch.setup(network_transport=FakeTransport(), content_type_resolver=None)

    result = await client.fetch(path.as_uri())
    assert result.headers["Content-Type"] == "application/octet-stream"


async def test_setup_with_file_transport() -> None:
    file_transport = FakeTransport({"file:///hello": (200, 0, "fake")})
    client = aio_fetch.setup(network_transport=FakeTransport(), file_transport=file_transport)

    result = await client.fetch("file:///hello", headers={"If-Modified-Since": "Sun, 13 Sep 2020 12:26:40 GMT"})
    assert result.body == "fake"
    assert file_transport.sent[0].headers["if-modified-since"] == "Sun, 13 Sep 2020 12:26:40 GMT"


def test_setup_with_conflicting_options() -> None:
    with pytest.raises(ValueError):
        aio_fetch.setup(network_transport=FakeTransport(), file_transport=FakeTransport(), max_ancestor_probes=1)


def test_client_rejects_unsupported_scheme() -> None:
    client = aio_fetch.setup(network_transport=FakeTransport())

    with pytest.raises(aio_fetch.UnsupportedSchemeError):
        client.fetch("ftp://service.com/")
    with pytest.raises(aio_fetch.UnsupportedSchemeError):
        client.fetch_all(["file:///hello", "ftp://service.com/"])
