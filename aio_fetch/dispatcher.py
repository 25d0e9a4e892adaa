import collections.abc
import logging

import prometheus_client as prom

from .base import BodyReadError, FetchResult, Request, Scheme
from .transport import Transport
from .utils import close_single, perf_counter, perf_counter_elapsed

logger = logging.getLogger(__package__)

latency_histogram = prom.Histogram(
    "aio_fetch_latency",
    "Duration of fetches.",
    labelnames=(
        "request_scheme",
        "request_method",
        "response_status",
    ),
    buckets=(
        0.005,
        0.01,
        0.025,
        0.05,
        0.075,
        0.1,
        0.15,
        0.2,
        0.25,
        0.3,
        0.35,
        0.4,
        0.45,
        0.5,
        0.75,
        1.0,
        5.0,
        10.0,
        15.0,
        20.0,
    ),
)


def capture_metrics(*, scheme: Scheme, method: str, status: int, elapsed: float) -> None:
    label_values = (
        str(scheme),
        method,
        str(status),
    )
    latency_histogram.labels(*label_values).observe(elapsed)


class Dispatcher:
    __slots__ = ("__file_transport", "__network_errors_code", "__network_transport")

    def __init__(self, *, file_transport: Transport, network_transport: Transport, network_errors_code: int = 502):
        self.__file_transport = file_transport
        self.__network_transport = network_transport
        self.__network_errors_code = network_errors_code

    def fetch(self, request: Request) -> collections.abc.Awaitable[FetchResult]:
        """Starts a fetch of a single resource.

        An unsupported scheme or a network url without a host is rejected right away, before anything is sent.
        The returned awaitable always resolves to a result: transport failures are reported as statuses.
        """
        scheme = Scheme.check_url(request.url)
        return self.__fetch(scheme, self.__get_transport(scheme), request)

    def __get_transport(self, scheme: Scheme) -> Transport:
        if scheme == Scheme.FILE:
            return self.__file_transport
        if scheme == Scheme.HTTP or scheme == Scheme.HTTPS:
            return self.__network_transport
        raise RuntimeError(f"Unexpected scheme {scheme}")

    async def __fetch(self, scheme: Scheme, transport: Transport, request: Request) -> FetchResult:
        started_at = perf_counter()
        response = await transport.send(request)
        try:
            content = await response.read()
        except BodyReadError:
            logger.warning(
                "Request %s %s has failed: body is incomplete",
                request.method,
                request.url,
                exc_info=True,
                extra={
                    "request_method": request.method,
                    "request_url": request.url,
                },
            )
            result = FetchResult(status=self.__network_errors_code)
        else:
            result = FetchResult(
                status=response.status,
                headers=response.headers,
                body=content.decode("utf-8", errors="replace") if content else None,
            )
        finally:
            await close_single(response)

        capture_metrics(
            scheme=scheme,
            method=request.method,
            status=result.status,
            elapsed=perf_counter_elapsed(started_at),
        )
        return result
