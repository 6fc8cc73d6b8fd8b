"""Fetchers for perfume product pages: curl-cffi by default, Zyte API on request."""

from .base import FetchResult
from .exceptions import TransportError
from .manager import build_fetcher

__all__ = [
    "build_fetcher",
    "FetchResult",
    "TransportError",
]
