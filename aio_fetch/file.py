import logging
import os
import pathlib
import stat

import multidict

from .base import STATUS_MESSAGES, BodyReadError, ClosableResponse, EmptyResponse, Header, Method, Request
from .content_type import DEFAULT_CONTENT_TYPE, ContentTypeResolver
from .filesystem import FileReader, FileSystem, LocalFileSystem
from .transport import Transport
from .utils import format_http_date, from_timestamp, try_parse_http_date, utcnow

logger = logging.getLogger(__package__)

ALLOWED_METHODS = (Method.HEAD, Method.GET)
TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"
DEFAULT_CHUNK_SIZE = 64 * 1024


class FileTransport(Transport):
    """Serves file urls with the semantics of an HTTP server.

    Every outcome, including filesystem faults, is reported as one of 200, 304, 307, 403, 404, 405 or 502:

    * a regular file is served with 200, or 304 if it has not been modified since If-Modified-Since;
    * a symbolic link is reported as 307 with its raw, unresolved text in Location;
    * a missing path is reported as 404, with Date and Last-Modified of the closest existing ancestor if any;
    * directories and other special files are reported as 404.
    """

    __slots__ = (
        "__chunk_size",
        "__content_type_resolver",
        "__file_system",
        "__max_ancestor_probes",
    )

    def __init__(
        self,
        *,
        file_system: FileSystem | None = None,
        content_type_resolver: ContentTypeResolver | None = None,
        max_ancestor_probes: int = 2,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        if max_ancestor_probes < 0:
            raise ValueError("max_ancestor_probes cannot be negative")
        if chunk_size <= 0:
            raise ValueError("chunk_size should be positive")

        self.__file_system = file_system or LocalFileSystem()
        self.__content_type_resolver = content_type_resolver
        self.__max_ancestor_probes = max_ancestor_probes
        self.__chunk_size = chunk_size

    async def send(self, request: Request) -> ClosableResponse:
        method = request.method
        path = request.url.path

        if method not in ALLOWED_METHODS:
            headers = multidict.CIMultiDict[str]()
            headers[Header.ALLOW] = ", ".join(ALLOWED_METHODS)
            return EmptyResponse(
                status=405, headers=multidict.CIMultiDictProxy[str](headers), text=STATUS_MESSAGES[405]
            )

        headers = multidict.CIMultiDict[str]()
        status = await self.__head(path, request, headers)
        logger.debug(
            "File request %s %s has completed with %s",
            method,
            path,
            status,
            extra={
                "request_method": method,
                "request_url": request.url,
                "response_status": status,
            },
        )

        if method == Method.HEAD:
            return EmptyResponse(status=status, headers=multidict.CIMultiDictProxy[str](headers))
        if status != 200:
            return _status_response(status, headers)
        return await self.__get(path, request, headers)

    async def __head(self, path: str, request: Request, headers: multidict.CIMultiDict[str]) -> int:
        try:
            stats = await self.__file_system.lstat(path)
        except (FileNotFoundError, ValueError):  # a path with a null byte cannot name a file
            return await self.__probe_ancestors(path, request, headers)
        except PermissionError:
            _log_fault("access denied", request)
            return 403
        except OSError:
            _log_fault("error reading metadata", request)
            return 502

        _set_dates(headers, stats)

        if stat.S_ISREG(stats.st_mode):
            if_modified_since = try_parse_http_date(request.headers.get(Header.IF_MODIFIED_SINCE))
            if if_modified_since is not None and if_modified_since >= from_timestamp(stats.st_mtime):
                return 304
            return 200

        if stat.S_ISLNK(stats.st_mode):
            try:
                headers[Header.LOCATION] = await self.__file_system.readlink(path)
            except (OSError, ValueError):
                _log_fault("error reading link", request)
                return 502
            return 307

        return 404

    async def __probe_ancestors(self, path: str, request: Request, headers: multidict.CIMultiDict[str]) -> int:
        for ancestor in _get_ancestors(path, self.__max_ancestor_probes):
            try:
                stats = await self.__file_system.stat(ancestor)
            except (FileNotFoundError, ValueError):
                continue
            except OSError:
                _log_fault("error reading ancestor metadata", request)
                return 502

            _set_dates(headers, stats)
            break

        return 404

    async def __get(self, path: str, request: Request, headers: multidict.CIMultiDict[str]) -> ClosableResponse:
        if self.__content_type_resolver is None:
            headers[Header.CONTENT_TYPE] = DEFAULT_CONTENT_TYPE
        else:
            headers[Header.CONTENT_TYPE] = str(self.__content_type_resolver.resolve(path))

        try:
            reader = await self.__file_system.open(path)
        except (OSError, ValueError):
            _log_fault("error opening file", request)
            return _status_response(502, headers)

        return _FileResponse(
            headers=multidict.CIMultiDictProxy[str](headers), reader=reader, chunk_size=self.__chunk_size
        )


class _FileResponse(ClosableResponse):
    __slots__ = ("__chunk_size", "__headers", "__reader")

    def __init__(self, *, headers: multidict.CIMultiDictProxy[str], reader: FileReader, chunk_size: int) -> None:
        self.__headers = headers
        self.__reader = reader
        self.__chunk_size = chunk_size

    @property
    def status(self) -> int:
        return 200

    @property
    def headers(self) -> multidict.CIMultiDictProxy[str]:
        return self.__headers

    async def read(self) -> bytes:
        chunks = []
        try:
            while True:
                chunk = await self.__reader.read(self.__chunk_size)
                if not chunk:
                    break
                chunks.append(chunk)
        except OSError as e:
            raise BodyReadError("File has failed while being read") from e
        return b"".join(chunks)

    async def close(self) -> None:
        await self.__reader.close()


def _status_response(status: int, headers: multidict.CIMultiDict[str]) -> ClosableResponse:
    text = STATUS_MESSAGES.get(status)
    if text is not None:
        headers[Header.CONTENT_TYPE] = TEXT_CONTENT_TYPE
    return EmptyResponse(status=status, headers=multidict.CIMultiDictProxy[str](headers), text=text)


def _set_dates(headers: multidict.CIMultiDict[str], stats: os.stat_result) -> None:
    headers[Header.DATE] = format_http_date(utcnow())
    headers[Header.LAST_MODIFIED] = format_http_date(from_timestamp(stats.st_mtime))


def _get_ancestors(path: str, max_probes: int) -> list[str]:
    parents = pathlib.PurePosixPath(path).parents
    ancestors = [str(parent) for parent in parents[:max_probes]]
    if parents:
        root = str(parents[-1])
        if root not in ancestors:
            ancestors.append(root)
    return ancestors


def _log_fault(reason: str, request: Request) -> None:
    logger.warning(
        "File request %s %s has failed: %s",
        request.method,
        request.url.path,
        reason,
        exc_info=True,
        extra={
            "request_method": request.method,
            "request_url": request.url,
        },
    )
