"""ZyteFetcher: proxy fetcher using the Zyte API, for pages behind anti-bot walls."""

from __future__ import annotations

import os
from base64 import b64decode

import requests

from .base import FetchResult
from .exceptions import TransportError

ZYTE_EXTRACT_URL = "https://api.zyte.com/v1/extract"


class ZyteFetcher:
    """Fetcher that uses the Zyte API for proxy-based page retrieval."""

    name = "zyte"

    def __init__(self, timeout: float = 30.0):
        self.timeout = timeout

    def fetch(self, url: str) -> FetchResult:
        """Fetch *url* via Zyte API. Raises TransportError if the key is missing or the request fails."""
        api_key = os.getenv("ZYTE_API_KEY")
        if not api_key:
            raise TransportError("ZYTE_API_KEY not set", strategy=self.name)

        try:
            api_response = requests.post(
                ZYTE_EXTRACT_URL,
                auth=(api_key, ""),
                json={"url": url, "httpResponseBody": True},
                timeout=self.timeout,
            )
            api_response.raise_for_status()
            payload = api_response.json()
        except requests.RequestException as exc:
            raise TransportError(
                f"Zyte API request failed: {exc}", strategy=self.name
            ) from exc
        except ValueError as exc:
            raise TransportError(
                f"Zyte API returned invalid JSON: {exc}", strategy=self.name
            ) from exc

        if not isinstance(payload, dict):
            raise TransportError(
                f"Zyte API returned unexpected payload type {type(payload).__name__}",
                strategy=self.name,
            )

        # Zyte relays the target's status separately from its own
        status_code = payload.get("statusCode", 200)
        if not isinstance(status_code, int) or not 200 <= status_code < 300:
            raise TransportError(
                f"HTTP error {status_code} for {url} (via Zyte)",
                strategy=self.name,
                status_code=status_code,
            )

        try:
            body = b64decode(payload["httpResponseBody"]).decode("utf-8")
        except (KeyError, ValueError) as exc:
            raise TransportError(
                f"Zyte API returned no usable body: {exc}", strategy=self.name
            ) from exc

        return FetchResult(
            html=body,
            status_code=status_code,
            strategy_used=self.name,
            url=url,
        )
