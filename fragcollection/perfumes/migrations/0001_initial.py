import uuid

import django.db.models.deletion
import django.db.models.functions.text
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="PerfumeInfo",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("name", models.CharField(max_length=100)),
                ("brand", models.CharField(max_length=100)),
                (
                    "description",
                    models.TextField(blank=True, max_length=2000, null=True),
                ),
                (
                    "image_url",
                    models.URLField(blank=True, max_length=500, null=True),
                ),
                ("source_url", models.URLField(max_length=500)),
                (
                    "fetched_at",
                    models.DateTimeField(default=django.utils.timezone.now),
                ),
                ("last_updated", models.DateTimeField(blank=True, null=True)),
            ],
            options={
                "ordering": ["brand", "name"],
            },
        ),
        migrations.CreateModel(
            name="PerfumeNote",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("name", models.CharField(max_length=100)),
                (
                    "phase",
                    models.CharField(
                        choices=[("top", "Top"), ("middle", "Middle"), ("base", "Base")],
                        max_length=10,
                    ),
                ),
                ("position", models.PositiveIntegerField(default=0)),
                (
                    "perfume",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="notes",
                        to="perfumes.perfumeinfo",
                    ),
                ),
            ],
            options={
                "ordering": ["position"],
            },
        ),
        migrations.AddConstraint(
            model_name="perfumeinfo",
            constraint=models.UniqueConstraint(
                django.db.models.functions.text.Lower("source_url"),
                name="perfumeinfo_source_url_ci_unique",
            ),
        ),
        migrations.AddIndex(
            model_name="perfumenote",
            index=models.Index(
                fields=["perfume", "phase"], name="perfumenote_perfume_phase_idx"
            ),
        ),
    ]
