import pytest
from perfumes.factories import PerfumeInfoFactory, PerfumeNoteFactory
from perfumes.models import PerfumeNote


@pytest.fixture
def perfume(db):
    return PerfumeInfoFactory()


@pytest.fixture
def perfume_with_notes(db):
    perfume = PerfumeInfoFactory()
    for position, (name, phase) in enumerate([
        ("Bergamot", PerfumeNote.TOP),
        ("Rose", PerfumeNote.MIDDLE),
        ("Vanilla", PerfumeNote.BASE),
    ]):
        PerfumeNoteFactory(perfume=perfume, name=name, phase=phase, position=position)
    return perfume
