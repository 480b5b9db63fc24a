"""Celery tasks for the HRM app."""
from __future__ import annotations

import logging

from celery import shared_task

from core.dates import today_local
from hrm.services import sync_leave_attendance

logger = logging.getLogger("hrms")


@shared_task(name="hrm.tasks.sync_leave_attendance")
def sync_leave_attendance_task():
    """Record today's attendance as ``leave`` for employees on approved leave."""
    day = today_local()
    created = sync_leave_attendance(day)
    logger.info("Leave attendance task for %s created=%s", day, created)
    return {"date": day.isoformat(), "created": created}
