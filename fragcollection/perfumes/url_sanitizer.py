"""URL sanitization for perfume product pages using w3lib.

Normalizes submitted product URLs so the same page always maps to the same
stored record:
- Strips surrounding whitespace
- Enforces https scheme
- Lowercases the hostname
- Strips fragments
- Sorts query parameters
- Strips tracking parameters (utm_*, fbclid, gclid, etc.)

Path case is preserved; records are matched on the sanitized URL
case-insensitively.
"""

from urllib.parse import urlparse, urlunparse

from w3lib.url import canonicalize_url, url_query_cleaner


TRACKING_PARAMS = [
    "utm_source",
    "utm_medium",
    "utm_campaign",
    "utm_term",
    "utm_content",
    "fbclid",
    "gclid",
    "gclsrc",
    "dclid",
    "gbraid",
    "wbraid",
    "msclkid",
    "twclid",
    "igshid",
    "mc_cid",
    "mc_eid",
    "yclid",
]


def sanitize_url(url: str) -> str:
    """Normalize a product URL to its canonical form.

    Args:
        url: The URL as submitted by the user.

    Returns:
        The canonical URL string.

    Raises:
        ValueError: If the URL is empty or has no hostname.
    """
    url = (url or "").strip()
    if not url:
        raise ValueError("URL is required")

    # Bare "www.fragrantica.com/..." input: urlparse would read it as a path
    if "://" not in url:
        url = f"https://{url}"

    canonical = canonicalize_url(url, keep_fragments=False)
    canonical = url_query_cleaner(canonical, TRACKING_PARAMS, remove=True)

    parsed = urlparse(canonical)
    hostname = parsed.hostname or ""
    if not hostname:
        raise ValueError(f"Could not extract hostname from URL: {url!r}")

    return urlunparse((
        "https",
        hostname + (f":{parsed.port}" if parsed.port and parsed.port != 443 else ""),
        parsed.path or "/",
        parsed.params,
        parsed.query,
        "",
    ))
