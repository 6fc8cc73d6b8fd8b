"""CurlCffiFetcher: browser TLS impersonation via curl-cffi."""

from __future__ import annotations

from curl_cffi import requests as curl_requests
from curl_cffi.requests.exceptions import RequestException

from .base import FetchResult
from .exceptions import TransportError

# Challenge pages come back as 200/503 with one of these in the body.
# Plain "cloudflare" is not listed: product pages load assets from its CDN.
CHALLENGE_SIGNATURES = [
    "checking your browser",
    "just a moment...",
    "cf-browser-verification",
    "cf-challenge",
    "attention required! | cloudflare",
]


class CurlCffiFetcher:
    """Fetcher using curl-cffi with browser TLS fingerprint impersonation."""

    name = "curl_cffi"

    def __init__(self, timeout: float = 30.0, impersonate: str = "chrome"):
        self.timeout = timeout
        self.impersonate = impersonate

    def fetch(self, url: str) -> FetchResult:
        """Fetch *url* using curl-cffi. Raises TransportError on any retrieval failure."""
        try:
            response = curl_requests.get(
                url,
                impersonate=self.impersonate,
                timeout=self.timeout,
            )
        except RequestException as exc:
            raise TransportError(
                f"curl-cffi request failed: {exc}", strategy=self.name
            ) from exc

        if self._is_challenge(response.text):
            raise TransportError(
                f"Anti-bot challenge page (status={response.status_code})",
                strategy=self.name,
                status_code=response.status_code,
            )

        if not 200 <= response.status_code < 300:
            raise TransportError(
                f"HTTP error {response.status_code} for {url}",
                strategy=self.name,
                status_code=response.status_code,
            )

        return FetchResult(
            html=response.text,
            status_code=response.status_code,
            strategy_used=self.name,
            url=url,
        )

    def _is_challenge(self, body: str) -> bool:
        """Check if the response body is a known anti-bot interstitial."""
        body_lower = body.lower()
        return any(sig in body_lower for sig in CHALLENGE_SIGNATURES)
