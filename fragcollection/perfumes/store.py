"""Persistence for resolved perfume records.

The store is the single piece of shared state between concurrent
resolutions.  Uniqueness of the (case-insensitive) source URL is enforced by
the database, and every write runs in its own transaction so a rejected
insert leaves nothing behind.
"""

from __future__ import annotations

from typing import Iterable

from django.db import IntegrityError, transaction

from perfumes.models import PerfumeInfo, PerfumeNote


class UniquenessViolation(Exception):
    """A record for this source URL already exists."""

    def __init__(self, source_url: str):
        self.source_url = source_url
        super().__init__(f"A perfume record already exists for {source_url}")


class PerfumeStore:
    """Django ORM backed store for PerfumeInfo records and their notes."""

    def _queryset(self):
        return PerfumeInfo.objects.prefetch_related("notes")

    def find_by_url(self, source_url: str) -> PerfumeInfo | None:
        """Return the record for *source_url* (case-insensitive) with its notes."""
        return self._queryset().filter(source_url__iexact=source_url).first()

    def get(self, pk) -> PerfumeInfo:
        return self._queryset().get(pk=pk)

    def insert(self, perfume: PerfumeInfo, notes: Iterable[PerfumeNote]) -> PerfumeInfo:
        """Insert a new record with its notes.

        Raises:
            UniquenessViolation: If a record with the same source URL exists.
        """
        try:
            with transaction.atomic():
                perfume.save(force_insert=True)
                self._attach_notes(perfume, notes)
        except IntegrityError as exc:
            raise UniquenessViolation(perfume.source_url) from exc
        return self.get(perfume.pk)

    def update(self, perfume: PerfumeInfo, notes: Iterable[PerfumeNote]) -> PerfumeInfo:
        """Save *perfume* and replace its whole note set.

        The record row is locked first, so concurrent refreshes of the same
        record replace the notes one after the other.
        """
        with transaction.atomic():
            PerfumeInfo.objects.select_for_update().only("pk").get(pk=perfume.pk)
            perfume.save()
            PerfumeNote.objects.filter(perfume=perfume).delete()
            self._attach_notes(perfume, notes)
        return self.get(perfume.pk)

    def _attach_notes(self, perfume: PerfumeInfo, notes: Iterable[PerfumeNote]) -> None:
        notes = list(notes)
        for position, note in enumerate(notes):
            note.perfume = perfume
            note.position = position
        PerfumeNote.objects.bulk_create(notes)
