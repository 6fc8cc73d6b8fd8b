"""
Django settings for the fragcollection project.

Only the pieces the perfume-metadata backend needs: the ORM, the REST
serializers, and the RQ queue used for background resolution.
"""

import os
from datetime import timedelta
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.getenv(
    "SECRET_KEY", "django-insecure-fragcollection-dev-key-change-in-production"
)

DEBUG = os.getenv("DEBUG", "True") == "True"

ALLOWED_HOSTS = os.getenv("ALLOWED_HOSTS", "localhost,127.0.0.1").split(",")


# Application definition

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.auth",
    # Third-party apps
    "rest_framework",
    "django_rq",
    # Local apps
    "perfumes",
]


# Database

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.getenv("FRAGCOLLECTION_DB_PATH", str(BASE_DIR / "db.sqlite3")),
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"


# Internationalization

LANGUAGE_CODE = "en-us"

TIME_ZONE = "UTC"

USE_I18N = True

USE_TZ = True


# RQ

RQ_QUEUES = {
    "default": {
        "HOST": os.getenv("REDIS_HOST", "localhost"),
        "PORT": int(os.getenv("REDIS_PORT", 6379)),
        "DB": 0,
        "DEFAULT_TIMEOUT": 360,
    },
}


# Perfume metadata resolution

# Records refreshed longer ago than this are re-fetched on next access
PERFUME_FRESHNESS_TTL = timedelta(days=int(os.getenv("PERFUME_FRESHNESS_DAYS", 30)))

# One of "curl_cffi" or "zyte"
PERFUME_FETCH_STRATEGY = os.getenv("PERFUME_FETCH_STRATEGY", "curl_cffi")

# Seconds; a timed-out fetch is treated like any other transport failure
PERFUME_FETCH_TIMEOUT = float(os.getenv("PERFUME_FETCH_TIMEOUT", 30))
