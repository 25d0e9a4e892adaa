import mimetypes

import aio_fetch


def test_content_type_str() -> None:
    assert str(aio_fetch.ContentType("image/png")) == "image/png"
    assert str(aio_fetch.ContentType("text/css", "UTF-8")) == "text/css; charset=UTF-8"


def test_textual_types_are_utf8() -> None:
    resolver = aio_fetch.MimetypesContentTypeResolver()

    assert resolver.resolve("/www/style.css") == aio_fetch.ContentType("text/css", "UTF-8")
    assert resolver.resolve("/www/data.json") == aio_fetch.ContentType("application/json", "UTF-8")
    assert resolver.resolve("/www/archive.zip") == aio_fetch.ContentType("application/zip")


def test_default_type() -> None:
    resolver = aio_fetch.MimetypesContentTypeResolver(default_type="text/plain")

    assert resolver.resolve("/www/README") == aio_fetch.ContentType("text/plain", "UTF-8")


def test_custom_mime_types() -> None:
    mime_types = mimetypes.MimeTypes()
    mime_types.add_type("application/x-custom", ".custom")
    resolver = aio_fetch.MimetypesContentTypeResolver(mime_types=mime_types)

    assert resolver.resolve("/www/file.custom") == aio_fetch.ContentType("application/x-custom")
