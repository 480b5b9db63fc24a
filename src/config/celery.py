"""Celery configuration."""
import os

from celery import Celery
from celery.schedules import crontab

os.environ.setdefault(
    "DJANGO_SETTINGS_MODULE",
    os.getenv("DJANGO_SETTINGS_MODULE", "config.settings.dev"),
)

app = Celery("hrms")
app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()

# Beat schedule (times are IST, see CELERY_TIMEZONE)
app.conf.beat_schedule = {
    "hrm-sync-leave-attendance": {
        "task": "hrm.tasks.sync_leave_attendance",
        "schedule": crontab(minute=5, hour=0),  # Daily just after midnight
    },
}
