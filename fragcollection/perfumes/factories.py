import uuid

import factory
from django.utils import timezone

from perfumes.models import PerfumeInfo, PerfumeNote


class PerfumeInfoFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = PerfumeInfo

    id = factory.LazyFunction(uuid.uuid4)
    brand = factory.Sequence(lambda n: f"Brand{n}")
    name = factory.Sequence(lambda n: f"Perfume {n}")
    description = "A test fragrance."
    image_url = factory.LazyAttribute(
        lambda o: f"https://fimgs.net/mdimg/perfume/375x500.{o.name.split()[-1]}.jpg"
    )
    source_url = factory.Sequence(
        lambda n: f"https://www.fragrantica.com/perfume/Brand{n}/Perfume-{n}.html"
    )
    fetched_at = factory.LazyFunction(timezone.now)
    last_updated = None


class PerfumeNoteFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = PerfumeNote

    perfume = factory.SubFactory(PerfumeInfoFactory)
    name = factory.Sequence(lambda n: f"Note {n}")
    phase = PerfumeNote.TOP
    position = factory.Sequence(lambda n: n)
