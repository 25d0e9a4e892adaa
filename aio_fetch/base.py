import abc
import dataclasses
import enum

import multidict
import yarl

from .utils import Closable

EMPTY_HEADERS = multidict.CIMultiDictProxy[str](multidict.CIMultiDict[str]())


class Method:
    HEAD = "HEAD"
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"


class Header:
    ALLOW = multidict.istr("Allow")
    CONTENT_TYPE = multidict.istr("Content-Type")
    DATE = multidict.istr("Date")
    IF_MODIFIED_SINCE = multidict.istr("If-Modified-Since")
    LAST_MODIFIED = multidict.istr("Last-Modified")
    LOCATION = multidict.istr("Location")


STATUS_MESSAGES: dict[int, str] = {
    403: "403: Access denied.",
    404: "404: File not found.",
    405: "405: Only the HEAD or GET methods are allowed.",
    502: "502: Error reading file.",
}


class UnsupportedSchemeError(ValueError):
    """No transport is able to serve the scheme of the url"""


class BodyReadError(Exception):
    """Body stream has failed before it was completely read"""


class InvalidUrlError(ValueError):
    """Network url has no host to connect to"""


class Scheme(enum.StrEnum):
    FILE = "file"
    HTTP = "http"
    HTTPS = "https"

    @staticmethod
    def from_url(url: yarl.URL) -> "Scheme":
        try:
            return Scheme(url.scheme.lower())
        except ValueError:
            raise UnsupportedSchemeError(f"No implementation for this resource's protocol: {url}") from None

    @staticmethod
    def check_url(url: yarl.URL) -> "Scheme":
        """Returns the scheme of a url which can be fetched, otherwise raises a ValueError subclass."""
        scheme = Scheme.from_url(url)
        if scheme != Scheme.FILE and not url.is_absolute():
            raise InvalidUrlError(f"Network url should have a host: {url}")
        return scheme


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class Request:
    method: str
    url: yarl.URL
    headers: multidict.CIMultiDictProxy[str] = dataclasses.field(default_factory=lambda: EMPTY_HEADERS)

    def __repr__(self) -> str:
        return f"<Request [{self.method} {self.url}]>"


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class FetchResult:
    status: int
    headers: multidict.CIMultiDictProxy[str] = dataclasses.field(default_factory=lambda: EMPTY_HEADERS)
    body: str | None = None

    def __repr__(self) -> str:
        return f"<FetchResult [{self.status}]>"


class ClosableResponse(Closable):
    __slots__ = ()

    @property
    @abc.abstractmethod
    def status(self) -> int: ...

    @property
    @abc.abstractmethod
    def headers(self) -> multidict.CIMultiDictProxy[str]: ...

    @abc.abstractmethod
    async def read(self) -> bytes: ...

    def __repr__(self) -> str:
        return f"<Response [{self.status}]>"


class EmptyResponse(ClosableResponse):
    __slots__ = ("__status", "__headers", "__text")

    def __init__(
        self,
        *,
        status: int,
        headers: multidict.CIMultiDictProxy[str] = EMPTY_HEADERS,
        text: str | None = None,
    ):
        self.__status = status
        self.__headers = headers
        self.__text = text

    @property
    def status(self) -> int:
        return self.__status

    @property
    def headers(self) -> multidict.CIMultiDictProxy[str]:
        return self.__headers

    async def read(self) -> bytes:
        if self.__text is None:
            return bytes()
        return self.__text.encode("utf-8")

    async def close(self) -> None:
        pass
