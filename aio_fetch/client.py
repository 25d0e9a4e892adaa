import collections.abc

import yarl

from .aggregator import FetchResults, fetch_all
from .base import FetchResult, Method
from .dispatcher import Dispatcher
from .request import Headers, request


class Client:
    __slots__ = ("__dispatcher",)

    def __init__(self, *, dispatcher: Dispatcher) -> None:
        self.__dispatcher = dispatcher

    def fetch(
        self,
        url: str | yarl.URL,
        *,
        method: str = Method.GET,
        headers: Headers | None = None,
    ) -> collections.abc.Awaitable[FetchResult]:
        return self.__dispatcher.fetch(request(method, url, headers=headers))

    def fetch_all(
        self,
        urls: collections.abc.Iterable[str | yarl.URL],
        *,
        method: str = Method.GET,
        headers: Headers | None = None,
    ) -> collections.abc.Awaitable[FetchResults]:
        return fetch_all(self.__dispatcher, [request(method, url, headers=headers) for url in urls])
