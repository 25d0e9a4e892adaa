import asyncio
import collections.abc
import dataclasses
import logging

import multidict

from .base import FetchResult, Request, Scheme
from .dispatcher import Dispatcher

logger = logging.getLogger(__package__)


@dataclasses.dataclass(frozen=True, slots=True)
class FetchResults:
    statuses: tuple[int, ...]
    headers: tuple[multidict.CIMultiDictProxy[str], ...]
    bodies: tuple[str | None, ...]

    @staticmethod
    def from_results(results: collections.abc.Sequence[FetchResult]) -> "FetchResults":
        return FetchResults(
            statuses=tuple(r.status for r in results),
            headers=tuple(r.headers for r in results),
            bodies=tuple(r.body for r in results),
        )

    def __len__(self) -> int:
        return len(self.statuses)

    def __getitem__(self, index: int) -> FetchResult:
        return FetchResult(status=self.statuses[index], headers=self.headers[index], body=self.bodies[index])


def fetch_all(
    dispatcher: Dispatcher, requests: collections.abc.Sequence[Request]
) -> collections.abc.Awaitable[FetchResults]:
    """Fetches all requests concurrently, results are aligned with the requests regardless of completion order.

    Every url is checked before any fetch starts, so one unfetchable url fails the whole batch up front.
    """
    for request in requests:
        Scheme.check_url(request.url)
    return _gather(dispatcher, requests)


async def _gather(dispatcher: Dispatcher, requests: collections.abc.Sequence[Request]) -> FetchResults:
    if not requests:
        return FetchResults(statuses=(), headers=(), bodies=())

    results = await asyncio.gather(*(dispatcher.fetch(request) for request in requests))
    logger.debug("Fetched %s resources", len(results), extra={"requests_count": len(results)})
    return FetchResults.from_results(results)
