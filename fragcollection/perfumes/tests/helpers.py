"""Page builder and fetcher double shared by the resolver-facing tests."""

from perfumes.fetchers.base import FetchResult


def make_page(title="Chanel No. 5", top=(), middle=(), base=(), description=None, image=None):
    """Build a minimal product page with the markers the extractor looks for."""
    parts = ["<html><body>"]
    if title is not None:
        parts.append(f'<h1 class="fn">{title}</h1>')
    if image:
        parts.append(f'<img class="fragpic" src="{image}">')
    if description:
        parts.append(f'<div class="fragrantica-blocktext">{description}</div>')
    for marker, names in (("notes-top", top), ("notes-middle", middle), ("notes-base", base)):
        if names:
            items = "".join(f'<div class="note">{name}</div>' for name in names)
            parts.append(f'<div class="{marker}">{items}</div>')
    parts.append("</body></html>")
    return "".join(parts)


class StubFetcher:
    """Fetcher double that records every call."""

    name = "stub"

    def __init__(self, html="", error=None, on_fetch=None):
        self.html = html
        self.error = error
        self.on_fetch = on_fetch
        self.calls = []

    def fetch(self, url):
        self.calls.append(url)
        if self.on_fetch:
            self.on_fetch(url)
        if self.error:
            raise self.error
        return FetchResult(html=self.html, status_code=200, strategy_used=self.name, url=url)
