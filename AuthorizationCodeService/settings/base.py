"""
Base Django settings for AuthorizationCodeService.

These settings are shared across all environments.
Environment-specific overrides are in dev.py, test.py, and prod.py
"""
import os
from pathlib import Path

from .logging import get_logging_config

# Build paths inside the project
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = os.environ.get(
    "SECRET_KEY", "django-insecure-8x#n2v@q$w7k!t0m3c^r5zj&p(1f)u9y_l4b6e*h+s-a=d2g%"
)

ENVIRONMENT = os.environ.get("ENVIRONMENT", "development")

# Application definition
INSTALLED_APPS = [
    "django.contrib.contenttypes",
    # Local apps
    "AuthorizationCodeService.apps.AuthorizationCodeServiceConfig",
    "core",
    "tenants",
    "blacklist",
    "licenses",
    "devices",
    "presence",
    "activations",
]

MIDDLEWARE = []

# Database
# https://docs.djangoproject.com/en/4.2/ref/settings/#databases
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": os.environ.get("DB_NAME", "authorization_codes"),
        "USER": os.environ.get("DB_USER", "postgres"),
        "PASSWORD": os.environ.get("DB_PASSWORD", "postgres"),
        "HOST": os.environ.get("DB_HOST", "localhost"),
        "PORT": os.environ.get("DB_PORT", "5432"),
        "OPTIONS": {
            "connect_timeout": 10,
        },
    }
}

# Internationalization
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

# Default primary key field type
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# Licensing
LICENSING = {
    "heartbeat_timeout_seconds": int(os.environ.get("HEARTBEAT_TIMEOUT", "30")),
    "token_ttl_hours": int(os.environ.get("TOKEN_TTL_HOURS", "24")),
    "sweep_interval_seconds": int(os.environ.get("SESSION_SWEEP_INTERVAL", "60")),
    "code_generation_max_attempts": int(os.environ.get("CODE_GENERATION_MAX_ATTEMPTS", "100")),
}

# Celery
CELERY_BROKER_URL = os.environ.get("CELERY_BROKER_URL", "redis://127.0.0.1:6379/0")
CELERY_TASK_SERIALIZER = "json"
CELERY_ACCEPT_CONTENT = ["json"]
CELERY_TIMEZONE = TIME_ZONE
CELERY_BEAT_SCHEDULE = {
    "sweep-stale-sessions": {
        "task": "core.tasks.sweep_stale_sessions",
        "schedule": float(LICENSING["sweep_interval_seconds"]),
    },
}

# Observability
LOGGING = get_logging_config(ENVIRONMENT)
