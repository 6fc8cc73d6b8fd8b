import uuid

from django.db import models
from django.db.models.functions import Lower
from django.utils import timezone

UNKNOWN = "Unknown"


class PerfumeInfo(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100)
    brand = models.CharField(max_length=100)
    description = models.TextField(max_length=2000, blank=True, null=True)
    image_url = models.URLField(max_length=500, blank=True, null=True)
    # Natural key; unique case-insensitively (see Meta.constraints)
    source_url = models.URLField(max_length=500)

    fetched_at = models.DateTimeField(default=timezone.now)
    # Null until the first successful refresh
    last_updated = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["brand", "name"]
        constraints = [
            models.UniqueConstraint(
                Lower("source_url"), name="perfumeinfo_source_url_ci_unique"
            ),
        ]

    def __str__(self):
        return f"{self.brand} {self.name}".strip()

    @property
    def is_placeholder(self) -> bool:
        """True for the record persisted when the first fetch failed."""
        return (
            self.name == UNKNOWN
            and self.brand == UNKNOWN
            and self.last_updated is None
            and not self.notes.all()
        )


class PerfumeNote(models.Model):
    TOP = "top"
    MIDDLE = "middle"
    BASE = "base"
    PHASE_CHOICES = [
        (TOP, "Top"),
        (MIDDLE, "Middle"),
        (BASE, "Base"),
    ]

    perfume = models.ForeignKey(
        PerfumeInfo, on_delete=models.CASCADE, related_name="notes"
    )
    name = models.CharField(max_length=100)
    phase = models.CharField(max_length=10, choices=PHASE_CHOICES)
    # Order of appearance in the source page
    position = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["position"]
        indexes = [
            models.Index(fields=["perfume", "phase"], name="perfumenote_perfume_phase_idx"),
        ]

    def __str__(self):
        return f"{self.name} ({self.get_phase_display()})"
