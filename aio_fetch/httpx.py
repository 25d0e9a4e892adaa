import logging

import httpx
import multidict

from .base import BodyReadError, ClosableResponse, EmptyResponse, Request
from .transport import Transport

logger = logging.getLogger(__package__)


class HttpxTransport(Transport):
    __slots__ = (
        "__client",
        "__network_errors_code",
        "__timeout",
    )

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        network_errors_code: int = 502,
        timeout: float | None = None,
    ):
        if timeout is not None and timeout <= 0:
            raise ValueError("timeout should be positive")

        self.__client = client
        self.__network_errors_code = network_errors_code
        self.__timeout = timeout

    async def send(self, request: Request) -> ClosableResponse:
        method = request.method
        url = request.url
        if not url.is_absolute():
            raise RuntimeError("Request url should be absolute")

        client_request = self.__client.build_request(
            method=method,
            url=httpx.URL(str(url)),
            headers=list(request.headers.items()),
            timeout=self.__timeout,
        )

        try:
            logger.debug(
                "Sending request %s %s with timeout %s",
                method,
                url,
                self.__timeout,
                extra={
                    "request_method": method,
                    "request_url": url,
                    "request_timeout": self.__timeout,
                },
            )
            client_response = await self.__client.send(client_request, follow_redirects=False)
            return _HttpxResponse(client_response)
        except httpx.TimeoutException:
            logger.warning(
                "Request %s %s has timed out after %s",
                method,
                url,
                self.__timeout,
                extra={
                    "request_method": method,
                    "request_url": url,
                    "request_timeout": self.__timeout,
                },
            )
            return EmptyResponse(status=self.__network_errors_code)
        except httpx.TransportError:
            logger.warning(
                "Request %s %s has failed: network error",
                method,
                url,
                exc_info=True,
                extra={
                    "request_method": method,
                    "request_url": url,
                },
            )
            return EmptyResponse(status=self.__network_errors_code)


class _HttpxResponse(ClosableResponse):
    __slots__ = ("__response",)

    def __init__(self, response: httpx.Response):
        self.__response = response

    async def close(self) -> None:
        await self.__response.aclose()

    @property
    def status(self) -> int:
        return self.__response.status_code

    @property
    def headers(self) -> multidict.CIMultiDictProxy[str]:
        return multidict.CIMultiDictProxy[str](multidict.CIMultiDict[str](self.__response.headers.multi_items()))

    async def read(self) -> bytes:
        try:
            return await self.__response.aread()
        except httpx.TransportError as e:
            raise BodyReadError("Connection has been closed before the response was completed") from e
