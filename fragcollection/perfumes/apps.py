from django.apps import AppConfig


class PerfumesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "perfumes"
    verbose_name = "Perfume metadata"
