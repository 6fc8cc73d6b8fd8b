"""Fetcher selection: one strategy per deployment, chosen in settings."""

from __future__ import annotations

from django.conf import settings
from loguru import logger

from .base import BaseFetcher
from .curl_cffi_fetcher import CurlCffiFetcher
from .zyte_fetcher import ZyteFetcher

FETCHERS: dict[str, type[CurlCffiFetcher] | type[ZyteFetcher]] = {
    CurlCffiFetcher.name: CurlCffiFetcher,
    ZyteFetcher.name: ZyteFetcher,
}


def build_fetcher(strategy: str | None = None, timeout: float | None = None) -> BaseFetcher:
    """Return a fetcher for *strategy*, defaulting to PERFUME_FETCH_STRATEGY.

    The fetcher does not retry and does not fall back to another strategy;
    a failure is reported to the caller as TransportError.
    """
    strategy = strategy or settings.PERFUME_FETCH_STRATEGY
    if timeout is None:
        timeout = settings.PERFUME_FETCH_TIMEOUT

    try:
        fetcher_cls = FETCHERS[strategy]
    except KeyError:
        raise ValueError(
            f"Unknown fetch strategy {strategy!r}; expected one of {sorted(FETCHERS)}"
        ) from None

    logger.debug(f"Using {strategy} fetcher (timeout={timeout}s)")
    return fetcher_cls(timeout=timeout)
