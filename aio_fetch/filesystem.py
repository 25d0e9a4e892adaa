import abc
import asyncio
import collections.abc
import functools
import io
import os
from typing import Any, TypeVar

from .utils import Closable

T = TypeVar("T")


class FileReader(Closable):
    __slots__ = ()

    @abc.abstractmethod
    async def read(self, size: int) -> bytes: ...


class FileSystem(abc.ABC):
    """Filesystem queries a file transport needs, all of them non-blocking for the event loop.

    Failures are reported with the builtin OSError hierarchy: FileNotFoundError, PermissionError and so on.
    """

    __slots__ = ()

    @abc.abstractmethod
    async def lstat(self, path: str) -> os.stat_result: ...

    @abc.abstractmethod
    async def stat(self, path: str) -> os.stat_result: ...

    @abc.abstractmethod
    async def readlink(self, path: str) -> str: ...

    @abc.abstractmethod
    async def open(self, path: str) -> FileReader: ...


class LocalFileSystem(FileSystem):
    __slots__ = ()

    async def lstat(self, path: str) -> os.stat_result:
        return await _run_in_executor(os.lstat, path)

    async def stat(self, path: str) -> os.stat_result:
        return await _run_in_executor(os.stat, path)

    async def readlink(self, path: str) -> str:
        return await _run_in_executor(os.readlink, path)

    async def open(self, path: str) -> FileReader:
        file = await _run_in_executor(functools.partial(open, path, "rb", buffering=0))
        return _LocalFileReader(file)


class _LocalFileReader(FileReader):
    __slots__ = ("__file",)

    def __init__(self, file: io.RawIOBase) -> None:
        self.__file = file

    async def read(self, size: int) -> bytes:
        return await _run_in_executor(self.__file.read, size) or bytes()

    async def close(self) -> None:
        await _run_in_executor(self.__file.close)


async def _run_in_executor(func: collections.abc.Callable[..., T], *args: Any) -> T:
    return await asyncio.get_running_loop().run_in_executor(None, func, *args)
