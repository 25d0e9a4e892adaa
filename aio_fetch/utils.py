import abc
import contextlib
import datetime
import email.utils
import time

perf_counter = time.perf_counter


def perf_counter_elapsed(started_at: float) -> float:
    return max(0.0, perf_counter() - started_at)


class Closable(abc.ABC):
    __slots__ = ()

    @abc.abstractmethod
    async def close(self) -> None: ...


async def close_single(item: Closable) -> None:
    with contextlib.suppress(Exception):
        await item.close()


def utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def from_timestamp(timestamp: float) -> datetime.datetime:
    """Converts a filesystem timestamp into the second precision an HTTP date is able to carry."""
    return datetime.datetime.fromtimestamp(int(timestamp), datetime.timezone.utc)


def format_http_date(value: datetime.datetime) -> str:
    return email.utils.format_datetime(value.astimezone(datetime.timezone.utc), usegmt=True)


def try_parse_http_date(value: str | None) -> datetime.datetime | None:
    """Parses an HTTP date, falling back to ISO 8601. Dates without an offset are taken as UTC."""
    if value is None:
        return None

    try:
        parsed = email.utils.parsedate_to_datetime(value)
    except (TypeError, ValueError):
        try:
            parsed = datetime.datetime.fromisoformat(value.strip())
        except ValueError:
            return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=datetime.timezone.utc)
    return parsed
