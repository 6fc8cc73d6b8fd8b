"""Tests for the ORM-backed PerfumeStore."""

import pytest
from django.db.models import QuerySet

from perfumes.factories import PerfumeInfoFactory
from perfumes.models import PerfumeInfo, PerfumeNote
from perfumes.store import PerfumeStore, UniquenessViolation


def _notes(*pairs):
    return [PerfumeNote(name=name, phase=phase) for name, phase in pairs]


@pytest.mark.django_db
class TestFindByUrl:
    def test_finds_existing_record(self, perfume):
        assert PerfumeStore().find_by_url(perfume.source_url) == perfume

    def test_lookup_is_case_insensitive(self, db):
        perfume = PerfumeInfoFactory(source_url="https://www.fragrantica.com/perfume/Dior/Sauvage-31861.html")
        found = PerfumeStore().find_by_url("https://WWW.fragrantica.com/perfume/dior/sauvage-31861.html")
        assert found == perfume

    def test_missing_record_returns_none(self, db):
        assert PerfumeStore().find_by_url("https://example.com/nothing.html") is None

    def test_notes_are_prefetched(self, perfume_with_notes, django_assert_num_queries):
        store = PerfumeStore()
        with django_assert_num_queries(2):
            found = store.find_by_url(perfume_with_notes.source_url)
            names = [n.name for n in found.notes.all()]
        assert names == ["Bergamot", "Rose", "Vanilla"]


@pytest.mark.django_db
class TestInsert:
    def test_insert_persists_record_and_notes_in_order(self):
        perfume = PerfumeInfo(name="No. 5", brand="Chanel", source_url="https://example.com/5.html")
        created = PerfumeStore().insert(
            perfume,
            _notes(("Aldehydes", PerfumeNote.TOP), ("Rose", PerfumeNote.MIDDLE), ("Aldehydes", PerfumeNote.TOP)),
        )

        assert created.pk == perfume.pk
        assert PerfumeInfo.objects.count() == 1
        assert [(n.name, n.phase, n.position) for n in created.notes.all()] == [
            ("Aldehydes", "top", 0),
            ("Rose", "middle", 1),
            ("Aldehydes", "top", 2),
        ]

    def test_duplicate_url_raises_uniqueness_violation(self, perfume):
        duplicate = PerfumeInfo(name="x", brand="y", source_url=perfume.source_url.upper())

        with pytest.raises(UniquenessViolation) as exc_info:
            PerfumeStore().insert(duplicate, _notes(("Musk", PerfumeNote.BASE)))

        assert exc_info.value.source_url == perfume.source_url.upper()
        assert PerfumeInfo.objects.count() == 1
        assert PerfumeNote.objects.count() == 0

    def test_store_usable_after_rejected_insert(self, perfume):
        store = PerfumeStore()
        with pytest.raises(UniquenessViolation):
            store.insert(PerfumeInfo(name="x", brand="y", source_url=perfume.source_url), [])

        assert store.find_by_url(perfume.source_url) == perfume


@pytest.mark.django_db
class TestUpdate:
    def test_update_replaces_whole_note_set(self, perfume_with_notes):
        store = PerfumeStore()
        perfume = store.find_by_url(perfume_with_notes.source_url)
        perfume.name = "Renamed"

        updated = store.update(perfume, _notes(("Lemon", PerfumeNote.TOP)))

        assert updated.name == "Renamed"
        assert [(n.name, n.phase) for n in updated.notes.all()] == [("Lemon", "top")]
        assert PerfumeNote.objects.count() == 1

    def test_update_with_no_notes_clears_them(self, perfume_with_notes):
        updated = PerfumeStore().update(perfume_with_notes, [])
        assert list(updated.notes.all()) == []

    def test_second_update_leaves_only_its_own_notes(self, perfume_with_notes):
        store = PerfumeStore()
        store.update(perfume_with_notes, _notes(("Lemon", PerfumeNote.TOP), ("Iris", PerfumeNote.MIDDLE)))

        updated = store.update(perfume_with_notes, _notes(("Amber", PerfumeNote.BASE)))

        assert [(n.name, n.phase, n.position) for n in updated.notes.all()] == [("Amber", "base", 0)]
        assert PerfumeNote.objects.filter(perfume=perfume_with_notes).count() == 1

    def test_update_locks_record_row_before_replacing_notes(self, perfume_with_notes, monkeypatch):
        locked = []
        original = QuerySet.select_for_update

        def recording_select_for_update(queryset, *args, **kwargs):
            locked.append(queryset.model)
            return original(queryset, *args, **kwargs)

        monkeypatch.setattr(QuerySet, "select_for_update", recording_select_for_update)

        PerfumeStore().update(perfume_with_notes, _notes(("Lemon", PerfumeNote.TOP)))

        assert locked == [PerfumeInfo]
