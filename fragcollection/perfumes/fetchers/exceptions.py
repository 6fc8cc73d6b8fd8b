"""Exceptions for the fetchers package."""

from __future__ import annotations


class TransportError(Exception):
    """The page could not be retrieved.

    Covers connection failures, timeouts, non-success statuses and anti-bot
    challenge pages. Parsing problems are never reported this way.
    """

    def __init__(self, message: str, strategy: str, status_code: int | None = None):
        self.strategy = strategy
        self.status_code = status_code
        super().__init__(message)
