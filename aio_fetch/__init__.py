import re
import sys
from typing import NamedTuple

from .aggregator import FetchResults, fetch_all
from .aiohttp import AioHttpTransport
from .base import (
    EMPTY_HEADERS,
    STATUS_MESSAGES,
    BodyReadError,
    ClosableResponse,
    EmptyResponse,
    FetchResult,
    Header,
    InvalidUrlError,
    Method,
    Request,
    Scheme,
    UnsupportedSchemeError,
)
from .client import Client
from .content_type import ContentType, ContentTypeResolver, MimetypesContentTypeResolver
from .dispatcher import Dispatcher
from .file import FileTransport
from .filesystem import FileReader, FileSystem, LocalFileSystem
from .request import get, head, request
from .setup import setup
from .transport import Transport

__all__: tuple[str, ...] = (
    "AioHttpTransport",
    "BodyReadError",
    "Client",
    "ClosableResponse",
    "ContentType",
    "ContentTypeResolver",
    "Dispatcher",
    "EMPTY_HEADERS",
    "EmptyResponse",
    "FetchResult",
    "FetchResults",
    "FileReader",
    "FileSystem",
    "FileTransport",
    "Header",
    "InvalidUrlError",
    "LocalFileSystem",
    "Method",
    "MimetypesContentTypeResolver",
    "Request",
    "STATUS_MESSAGES",
    "Scheme",
    "Transport",
    "UnsupportedSchemeError",
    "fetch_all",
    "get",
    "head",
    "request",
    "setup",
)

try:
    import httpx  # noqa

    from .httpx import HttpxTransport

    __all__ += ("HttpxTransport",)  # type: ignore
except ImportError:
    pass

__version__ = "0.1.0"

version = f"{__version__}, Python {sys.version}"


class VersionInfo(NamedTuple):
    major: int
    minor: int
    micro: int
    release_level: str
    serial: int


_VERSION_RE = re.compile(r"(\d+)\.(\d+)\.(\d+)(?:([a-z]+)(\d*))?")
_RELEASE_LEVELS = {"a": "alpha", "b": "beta", "rc": "candidate", "": "final"}


def _parse_version(v: str) -> VersionInfo:
    match = _VERSION_RE.fullmatch(v)
    if match is None:
        raise ImportError(f"Invalid package version {v}")

    major, minor, micro, level, serial = match.groups(default="")
    release_level = _RELEASE_LEVELS.get(level)
    if release_level is None:
        raise ImportError(f"Unknown release level of package version {v}")
    return VersionInfo(int(major), int(minor), int(micro), release_level, int(serial or 0))


version_info = _parse_version(__version__)
