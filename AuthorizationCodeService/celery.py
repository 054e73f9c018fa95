"""
Celery application.

Runs the periodic stale-session sweep (``core.tasks.sweep_stale_sessions``)
on the beat schedule declared in settings.
"""
import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "AuthorizationCodeService.settings.dev")

app = Celery("AuthorizationCodeService")

# CELERY_* Django settings
app.config_from_object("django.conf:settings", namespace="CELERY")

app.autodiscover_tasks()
