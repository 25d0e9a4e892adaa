import collections.abc

import multidict
import yarl

from .base import EMPTY_HEADERS, Method, Request

Headers = (
    collections.abc.Mapping[str | multidict.istr, str] | multidict.CIMultiDictProxy[str] | multidict.CIMultiDict[str]
)


def head(url: str | yarl.URL, *, headers: Headers | None = None) -> Request:
    return request(Method.HEAD, url, headers=headers)


def get(url: str | yarl.URL, *, headers: Headers | None = None) -> Request:
    return request(Method.GET, url, headers=headers)


def request(method: str, url: str | yarl.URL, *, headers: Headers | None = None) -> Request:
    return Request(method=method.upper(), url=ensure_url(url), headers=build_headers(headers))


def build_headers(headers: Headers | None) -> multidict.CIMultiDictProxy[str]:
    if headers is None:
        return EMPTY_HEADERS
    if isinstance(headers, multidict.CIMultiDictProxy):
        return headers
    return multidict.CIMultiDictProxy[str](multidict.CIMultiDict[str](headers))


def ensure_url(url: str | yarl.URL) -> yarl.URL:
    if isinstance(url, yarl.URL):
        return url
    return yarl.URL(url)
