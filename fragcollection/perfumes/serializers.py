from rest_framework import serializers

from perfumes.models import PerfumeInfo, PerfumeNote


class PerfumeNoteSerializer(serializers.ModelSerializer):
    class Meta:
        model = PerfumeNote
        fields = ("name", "phase")


class PerfumeInfoSerializer(serializers.ModelSerializer):
    """Perfume record with its notes split into the three pyramid phases."""

    top_notes = serializers.SerializerMethodField()
    middle_notes = serializers.SerializerMethodField()
    base_notes = serializers.SerializerMethodField()

    class Meta:
        model = PerfumeInfo
        fields = (
            "id",
            "name",
            "brand",
            "description",
            "image_url",
            "source_url",
            "fetched_at",
            "last_updated",
            "top_notes",
            "middle_notes",
            "base_notes",
        )
        read_only_fields = fields

    def _notes_for(self, perfume, phase):
        # .all() so prefetched notes are reused
        notes = [note for note in perfume.notes.all() if note.phase == phase]
        return PerfumeNoteSerializer(notes, many=True).data

    def get_top_notes(self, perfume):
        return self._notes_for(perfume, PerfumeNote.TOP)

    def get_middle_notes(self, perfume):
        return self._notes_for(perfume, PerfumeNote.MIDDLE)

    def get_base_notes(self, perfume):
        return self._notes_for(perfume, PerfumeNote.BASE)
