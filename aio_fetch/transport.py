import abc

from .base import ClosableResponse, Request


class Transport(abc.ABC):
    __slots__ = ()

    @abc.abstractmethod
    async def send(self, request: Request) -> ClosableResponse:
        ...
