"""Perfume metadata resolution: serve, refresh or fetch a record for a URL.

``PerfumeResolver.resolve`` is the one entry point the rest of the
application uses.  For a product URL it:

1. Sanitizes the URL and looks the record up (case-insensitively).
2. Returns a fresh record as-is, without touching the network.
3. Otherwise fetches and extracts the page, then inserts a new record or
   overwrites the stale one, replacing its notes wholesale.
4. On a transport failure returns the stale record untouched, or persists
   an "Unknown" placeholder when there was nothing stored yet.

Two first-time resolutions of the same URL race on insert; the loser gets a
UniquenessViolation from the store and returns the winner's record.
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable

from django.conf import settings
from django.utils import timezone
from loguru import logger

from perfumes.extractor import ExtractedPerfume, extract_perfume
from perfumes.fetchers.base import BaseFetcher
from perfumes.fetchers.exceptions import TransportError
from perfumes.fetchers.manager import build_fetcher
from perfumes.models import UNKNOWN, PerfumeInfo, PerfumeNote
from perfumes.store import PerfumeStore, UniquenessViolation
from perfumes.url_sanitizer import sanitize_url


def is_fresh(perfume: PerfumeInfo, now: datetime | None = None) -> bool:
    """Return True if *perfume* does not need refreshing.

    A record that was never refreshed stays fresh; a refreshed one is fresh
    until PERFUME_FRESHNESS_TTL has passed since ``last_updated``.
    """
    if perfume.last_updated is None:
        return True
    age = (now or timezone.now()) - perfume.last_updated
    return age <= settings.PERFUME_FRESHNESS_TTL


def _clip(value: str | None, field_name: str, model=PerfumeInfo) -> str | None:
    """Trim *value* to the column's max_length."""
    if value is None:
        return None
    max_length = model._meta.get_field(field_name).max_length
    return value[:max_length] if max_length else value


class PerfumeResolver:
    """Resolves product URLs to stored PerfumeInfo records."""

    def __init__(
        self,
        store: PerfumeStore | None = None,
        fetcher: BaseFetcher | None = None,
        extractor: Callable[[str, str], ExtractedPerfume] = extract_perfume,
    ) -> None:
        self.store = store or PerfumeStore()
        self.fetcher = fetcher or build_fetcher()
        self.extractor = extractor

    def resolve(self, url: str) -> PerfumeInfo:
        """Return the record for *url*, fetching or refreshing it as needed.

        Raises:
            ValueError: If *url* is empty or not a usable URL.
            django.db.Error: If the store itself fails.
        """
        source_url = sanitize_url(url)
        existing = self.store.find_by_url(source_url)

        if existing is not None and is_fresh(existing):
            logger.debug(f"Serving stored perfume {existing.pk} for {source_url}")
            return existing

        if existing is None:
            logger.info(f"No stored perfume for {source_url}, fetching")
        else:
            logger.info(
                f"Perfume {existing.pk} for {source_url} is stale "
                f"(last updated {existing.last_updated.isoformat()}), refreshing"
            )

        try:
            result = self.fetcher.fetch(source_url)
        except TransportError as exc:
            return self._fall_back(source_url, existing, exc)

        logger.info(
            f"Fetched {result.url} via {result.strategy_used} "
            f"(status {result.status_code}, {len(result.html)} chars)"
        )

        extracted = self.extractor(result.html, source_url)

        if existing is None:
            perfume = self._build_record(source_url, extracted)
            return self._insert(perfume, self._build_notes(extracted))
        return self._refresh(existing, extracted)

    # -- write paths -------------------------------------------------------

    def _fall_back(
        self, source_url: str, existing: PerfumeInfo | None, exc: TransportError
    ) -> PerfumeInfo:
        """Best available record after a failed fetch."""
        if existing is not None:
            logger.warning(
                f"Fetch failed for {source_url} via {exc.strategy}: {exc}; "
                f"keeping stale perfume {existing.pk}"
            )
            return existing

        logger.warning(
            f"Fetch failed for {source_url} via {exc.strategy}: {exc}; "
            f"storing placeholder"
        )
        placeholder = PerfumeInfo(
            name=UNKNOWN,
            brand=UNKNOWN,
            source_url=source_url,
            fetched_at=timezone.now(),
        )
        return self._insert(placeholder, [])

    def _insert(self, perfume: PerfumeInfo, notes: list[PerfumeNote]) -> PerfumeInfo:
        try:
            created = self.store.insert(perfume, notes)
        except UniquenessViolation:
            concurrent = self.store.find_by_url(perfume.source_url)
            if concurrent is None:
                raise
            logger.info(
                f"Perfume for {perfume.source_url} was created concurrently, "
                f"using {concurrent.pk}"
            )
            return concurrent

        logger.info(
            f"Stored perfume {created.pk} ({created}) for {created.source_url} "
            f"with {len(notes)} notes"
        )
        return created

    def _refresh(self, perfume: PerfumeInfo, extracted: ExtractedPerfume) -> PerfumeInfo:
        perfume.name = _clip(extracted.name, "name")
        perfume.brand = _clip(extracted.brand, "brand")
        perfume.description = _clip(extracted.description, "description")
        perfume.image_url = _clip(extracted.image_url, "image_url")
        perfume.last_updated = timezone.now()

        notes = self._build_notes(extracted)
        refreshed = self.store.update(perfume, notes)
        logger.info(
            f"Refreshed perfume {refreshed.pk} ({refreshed}) with {len(notes)} notes"
        )
        return refreshed

    # -- builders ----------------------------------------------------------

    def _build_record(self, source_url: str, extracted: ExtractedPerfume) -> PerfumeInfo:
        return PerfumeInfo(
            name=_clip(extracted.name, "name"),
            brand=_clip(extracted.brand, "brand"),
            description=_clip(extracted.description, "description"),
            image_url=_clip(extracted.image_url, "image_url"),
            source_url=source_url,
            fetched_at=timezone.now(),
        )

    def _build_notes(self, extracted: ExtractedPerfume) -> list[PerfumeNote]:
        return [
            PerfumeNote(name=_clip(note.name, "name", model=PerfumeNote), phase=note.phase)
            for note in extracted.notes
        ]


def resolve_perfume(url: str) -> PerfumeInfo:
    """Resolve *url* with the default store and the configured fetcher."""
    return PerfumeResolver().resolve(url)
