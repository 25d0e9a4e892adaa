import logging

import aiohttp
import multidict

from .base import BodyReadError, ClosableResponse, EmptyResponse, Request
from .transport import Transport

logger = logging.getLogger(__package__)


class AioHttpTransport(Transport):
    __slots__ = (
        "__client_session",
        "__network_errors_code",
        "__timeout",
    )

    def __init__(
        self,
        client_session: aiohttp.ClientSession,
        *,
        network_errors_code: int = 502,
        timeout: float | None = None,
    ) -> None:
        if timeout is not None and timeout <= 0:
            raise ValueError("timeout should be positive")

        self.__client_session = client_session
        self.__network_errors_code = network_errors_code
        self.__timeout = timeout

    async def send(self, request: Request) -> ClosableResponse:
        method = request.method
        url = request.url
        if not url.is_absolute():
            raise RuntimeError("Request url should be absolute")

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
            response = await self.__client_session.request(
                method,
                url,
                headers=request.headers,
                timeout=aiohttp.ClientTimeout(total=self.__timeout),
                allow_redirects=False,
            )
            try:
                await response.read()  # force response to buffer its body, an abrupt close fails here
            except BaseException:
                response.close()
                raise
            return _AioHttpResponse(response)
        except aiohttp.ClientError:
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
        except TimeoutError:
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


class _AioHttpResponse(ClosableResponse):
    __slots__ = ("__response",)

    def __init__(self, response: aiohttp.ClientResponse) -> None:
        self.__response = response

    @property
    def status(self) -> int:
        return self.__response.status

    @property
    def headers(self) -> multidict.CIMultiDictProxy[str]:
        return self.__response.headers

    async def read(self) -> bytes:
        try:
            return await self.__response.read()
        except aiohttp.ClientError as e:
            raise BodyReadError("Connection has been closed before the response was completed") from e

    async def close(self) -> None:
        await self.__response.release()
