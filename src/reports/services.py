"""Service functions for the reports app.

These functions hold the aggregation logic behind the attendance, leave,
performance, expense, goal and dashboard views so the views stay thin and the
same figures are reusable from Celery tasks or exports.

The pure helpers (``summarize_attendance``, ``performance_stats`` ...) work on
any iterable of objects exposing the expected attributes; the ``*_report`` and
``dashboard_snapshot`` functions query the database.
"""
from __future__ import annotations

import logging
from collections import OrderedDict
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from django.conf import settings

from core.dates import calendar_months, month_bounds, time_ago, today_local, week_start
from goals.models import progress_percentage

logger = logging.getLogger("hrms")

UNKNOWN_EMPLOYEE = "Unknown"

PRIORITY_ORDER = {"high": 0, "medium": 1, "low": 2}


# ---------------------------------------------------------------------------
# Attendance aggregation
# ---------------------------------------------------------------------------

def attendance_rate(present: int, total: int) -> float:
    """``present / total * 100`` rounded to one decimal, 0 when there is no record."""
    if not total:
        return 0.0
    return round(present / total * 100, 1)


@dataclass
class AttendanceSummary:
    """Per-employee attendance counters."""

    employee_id: str
    present: int = 0
    absent: int = 0
    leave: int = 0
    last_updated: datetime | None = None

    @property
    def total(self) -> int:
        return self.present + self.absent + self.leave

    @property
    def rate(self) -> float:
        return attendance_rate(self.present, self.total)

    def add(self, status: str, timestamp: datetime | None = None):
        if status == "present":
            self.present += 1
        elif status == "absent":
            self.absent += 1
        elif status == "leave":
            self.leave += 1
        else:
            logger.warning("Unknown attendance status ignored: %s", status)
            return
        if timestamp is not None and (self.last_updated is None or timestamp > self.last_updated):
            self.last_updated = timestamp

    def as_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "present": self.present,
            "absent": self.absent,
            "leave": self.leave,
            "total": self.total,
            "rate": self.rate,
            "last_updated": self.last_updated,
        }


def summarize_attendance(records) -> "OrderedDict[str, AttendanceSummary]":
    """Group attendance *records* by employee in a single pass.

    Keys keep the order in which employees first appear; ``last_updated`` is
    the latest ``updated_at`` (or ``created_at``) seen for the employee.
    """
    summaries: OrderedDict[str, AttendanceSummary] = OrderedDict()
    for record in records:
        key = str(record.employee_id)
        summary = summaries.get(key)
        if summary is None:
            summary = summaries[key] = AttendanceSummary(employee_id=key)
        timestamp = getattr(record, "updated_at", None) or getattr(record, "created_at", None)
        summary.add(str(record.status), timestamp)
    return summaries


def rank_by_attendance(summaries, limit: int = 5) -> list[AttendanceSummary]:
    """Highest attendance rate first; equal rates keep their input order."""
    return sorted(summaries, key=lambda s: s.rate, reverse=True)[:limit]


def employee_label(employee) -> str:
    if employee is None:
        return UNKNOWN_EMPLOYEE
    return employee.full_name or UNKNOWN_EMPLOYEE


# ---------------------------------------------------------------------------
# Leave
# ---------------------------------------------------------------------------

def leave_day_count(start_date: date, end_date: date) -> int:
    """Inclusive number of calendar days covered by a leave."""
    return (end_date - start_date).days + 1


def leave_status_counts(leaves) -> dict:
    counts = {"pending": 0, "approved": 0, "rejected": 0}
    for leave in leaves:
        if leave.status in counts:
            counts[leave.status] += 1
    return counts


# ---------------------------------------------------------------------------
# Performance
# ---------------------------------------------------------------------------

def performance_level(rating) -> str:
    rating = float(rating or 0)
    if rating >= 4.5:
        return "Excellent"
    if rating >= 3.5:
        return "Good"
    if rating >= 2.5:
        return "Average"
    return "Needs Improvement"


def performance_stats(reviews, active_employee_count: int) -> dict:
    reviews = list(reviews)
    distribution = {"excellent": 0, "good": 0, "average": 0, "poor": 0}
    ratings = []
    reviewed = set()
    for review in reviews:
        rating = float(review.overall_rating)
        ratings.append(rating)
        reviewed.add(str(review.employee_id))
        if rating >= 4.5:
            distribution["excellent"] += 1
        elif rating >= 3.5:
            distribution["good"] += 1
        elif rating >= 2.5:
            distribution["average"] += 1
        else:
            distribution["poor"] += 1

    average = round(sum(ratings) / len(ratings), 1) if ratings else 0.0
    return {
        "total_reviews": len(reviews),
        "average_rating": average,
        "distribution": distribution,
        "reviewed_employees": len(reviewed),
        "pending_reviews": max(active_employee_count - len(reviewed), 0),
    }


# ---------------------------------------------------------------------------
# Expenses
# ---------------------------------------------------------------------------

def expense_stats(expenses) -> dict:
    stats = {
        "total": 0,
        "pending": 0,
        "approved": 0,
        "rejected": 0,
        "total_amount": Decimal("0.00"),
        "pending_amount": Decimal("0.00"),
        "currency": settings.CURRENCY,
    }
    for expense in expenses:
        stats["total"] += 1
        stats["total_amount"] += expense.amount
        if expense.status in ("pending", "approved", "rejected"):
            stats[expense.status] += 1
        if expense.status == "pending":
            stats["pending_amount"] += expense.amount
    return stats


# ---------------------------------------------------------------------------
# Exit formalities
# ---------------------------------------------------------------------------

EXIT_TABS = {
    "active": ("pending", "in_progress"),
    "completed": ("completed",),
    "rejected": ("rejected",),
}


def exit_stats(exits) -> dict:
    stats = {"total": 0, "pending": 0, "in_progress": 0, "completed": 0, "rejected": 0}
    for exit_formality in exits:
        stats["total"] += 1
        if exit_formality.status in stats:
            stats[exit_formality.status] += 1
    stats["active"] = stats["pending"] + stats["in_progress"]
    return stats


# ---------------------------------------------------------------------------
# Goals / KPIs
# ---------------------------------------------------------------------------

def _target_row(item, kind: str) -> dict:
    employee = item.employee
    return {
        "id": str(item.pk),
        "type": kind,
        "title": item.title,
        "description": item.description,
        "category": item.category,
        "status": item.status,
        "current_value": item.current_value,
        "target_value": item.target_value,
        "unit": item.unit,
        "progress": round(item.progress, 1),
        "start_date": item.start_date,
        "end_date": item.end_date,
        "employee_id": str(item.employee_id) if item.employee_id else None,
        "employee_name": employee_label(employee),
        "employee_email": (employee.email if employee else "") or "",
        "department": (employee.department if employee else "") or "N/A",
        "created_at": item.created_at,
    }


def goals_overview(goals, kpis) -> dict:
    """Merge goals and KPIs into one listing (newest first) with summary stats."""
    rows = [_target_row(goal, "goal") for goal in goals] + [_target_row(kpi, "kpi") for kpi in kpis]
    rows.sort(key=lambda row: row["created_at"], reverse=True)

    goal_rows = [row for row in rows if row["type"] == "goal"]
    total_progress = sum(
        progress_percentage(row["current_value"], row["target_value"]) for row in rows
    )
    stats = {
        "total_goals": len(goal_rows),
        "completed_goals": sum(1 for row in goal_rows if row["status"] == "completed"),
        "total_kpis": len(rows) - len(goal_rows),
        "average_progress": round(total_progress / len(rows)) if rows else 0,
    }
    return {"results": rows, "stats": stats}


# ---------------------------------------------------------------------------
# Monthly attendance report
# ---------------------------------------------------------------------------

def monthly_attendance_report(month_start: date) -> dict:
    """Attendance figures for the month starting at *month_start*."""
    from hrm.models import AttendanceRecord, Employee, LeaveRequest

    period_start, period_end = month_bounds(month_start)
    records = list(
        AttendanceRecord.objects.filter(date__range=(period_start, period_end))
        .select_related("employee")
        .order_by("date", "created_at")
    )
    summaries = summarize_attendance(records)

    employees = {str(emp.pk): emp for emp in Employee.objects.filter(is_active=True)}
    for record in records:
        employees.setdefault(str(record.employee_id), record.employee)

    rows = []
    for employee_id, employee in sorted(employees.items(), key=lambda item: employee_label(item[1]).lower()):
        summary = summaries.get(employee_id) or AttendanceSummary(employee_id=employee_id)
        rows.append(
            {
                "employee_id": employee_id,
                "employee_code": employee.employee_code,
                "name": employee_label(employee),
                "email": employee.email,
                "department": employee.department,
                "total": summary.total,
                "present": summary.present,
                "absent": summary.absent,
                "leave": summary.leave,
                "rate": summary.rate,
            }
        )

    present = sum(s.present for s in summaries.values())
    absent = sum(s.absent for s in summaries.values())
    leave = sum(s.leave for s in summaries.values())
    leaves = LeaveRequest.objects.filter(start_date__range=(period_start, period_end))

    stats = {
        "total_employees": Employee.objects.filter(is_active=True).count(),
        "present": present,
        "absent": absent,
        "leave": leave,
        "total_records": len(records),
        "attendance_rate": attendance_rate(present, len(records)),
        "leaves": leave_status_counts(leaves),
    }
    return {
        "month": period_start.strftime("%Y-%m"),
        "period_start": period_start,
        "period_end": period_end,
        "stats": stats,
        "rows": rows,
    }


def employee_month_records(employee, month_start: date):
    from hrm.models import AttendanceRecord

    period_start, period_end = month_bounds(month_start)
    return list(
        AttendanceRecord.objects.filter(employee=employee, date__range=(period_start, period_end)).order_by("date")
    )


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------

def _sort_alerts(alerts):
    return sorted(alerts, key=lambda alert: PRIORITY_ORDER.get(alert["priority"], len(PRIORITY_ORDER)))


def reviews_due(employees, today: date, cycle_months: int | None = None):
    """Employees whose months of service are a positive multiple of the review cycle.

    Months are counted on the calendar (2024-01-20 to 2024-07-10 is 6).
    """
    cycle = cycle_months or getattr(settings, "HR_REVIEW_CYCLE_MONTHS", 6)
    due = []
    for employee in employees:
        if not employee.joining_date:
            continue
        months = calendar_months(employee.joining_date, today)
        if months > 0 and months % cycle == 0:
            due.append(employee)
    return due


DASHBOARD_PERIODS = ("today", "this_week", "this_month", "this_year")


def period_start(period: str, today: date) -> date:
    """First day of the dashboard *period* containing *today*."""
    if period == "today":
        return today
    if period == "this_week":
        return week_start(today)
    if period == "this_month":
        return today.replace(day=1)
    if period == "this_year":
        return today.replace(month=1, day=1)
    raise ValueError(f"Periode inconnue : {period}. Valeurs possibles : {', '.join(DASHBOARD_PERIODS)}.")


def dashboard_snapshot(today: date | None = None, period: str = "this_month") -> dict:
    """Figures for the landing dashboard, computed for *today* (IST).

    *period* selects the window (``period_start(period)`` to *today*) behind
    ``attendance_rate`` and ``top_attendance``; the other figures are fixed
    to today or the current month.
    """
    from hrm.models import AttendanceRecord, Employee, LeaveRequest

    today = today or today_local()
    start = period_start(period, today)
    month_start, month_end = month_bounds(today)

    all_employees = Employee.objects.all()
    active_employees = list(Employee.objects.filter(is_active=True))
    active_count = len(active_employees)

    today_records = list(AttendanceRecord.objects.filter(date=today))
    today_present = sum(1 for r in today_records if r.status == AttendanceRecord.Status.PRESENT)
    today_absent = sum(1 for r in today_records if r.status == AttendanceRecord.Status.ABSENT)

    month_records = list(
        AttendanceRecord.objects.filter(date__range=(month_start, month_end)).select_related("employee")
    )
    month_present = sum(1 for r in month_records if r.status == AttendanceRecord.Status.PRESENT)

    period_records = list(
        AttendanceRecord.objects.filter(date__range=(start, today)).select_related("employee")
    )
    period_present = sum(1 for r in period_records if r.status == AttendanceRecord.Status.PRESENT)

    pending_leaves = list(
        LeaveRequest.objects.filter(status=LeaveRequest.Status.PENDING)
        .select_related("employee")
        .order_by("created_at")
    )
    on_leave_today = (
        LeaveRequest.objects.filter(
            status=LeaveRequest.Status.APPROVED,
            start_date__lte=today,
            end_date__gte=today,
        )
        .values("employee_id")
        .distinct()
        .count()
    )

    quick_stats = {
        "total_employees": all_employees.count(),
        "active_employees": active_count,
        "today_present": today_present,
        "today_absent": today_absent,
        "monthly_attendance_rate": attendance_rate(month_present, len(month_records)),
        "attendance_rate": attendance_rate(period_present, len(period_records)),
        "pending_leaves": len(pending_leaves),
        "on_leave_today": on_leave_today,
        "new_hires_this_month": all_employees.filter(joining_date__range=(month_start, month_end)).count(),
    }

    activities = []
    for record in AttendanceRecord.objects.select_related("employee").order_by("-created_at")[:5]:
        activities.append(
            {
                "type": "attendance",
                "message": f"{employee_label(record.employee)} marked {record.get_status_display()}",
                "timestamp": record.created_at,
            }
        )
    for leave in LeaveRequest.objects.select_related("employee").order_by("-created_at")[:5]:
        activities.append(
            {
                "type": "leave",
                "message": f"{employee_label(leave.employee)} applied for {leave.get_leave_type_display()}",
                "timestamp": leave.created_at,
            }
        )
    activities.sort(key=lambda item: item["timestamp"], reverse=True)
    recent_activities = [dict(item, time_ago=time_ago(item["timestamp"])) for item in activities[:8]]

    pending_approvals = [
        {
            "id": str(leave.pk),
            "employee_name": employee_label(leave.employee),
            "leave_type": leave.leave_type,
            "start_date": leave.start_date,
            "end_date": leave.end_date,
            "days": leave_day_count(leave.start_date, leave.end_date),
            "created_at": leave.created_at,
        }
        for leave in pending_leaves
    ]

    alerts = []
    missing = Employee.objects.filter(is_active=True).exclude(attendance_records__date=today).count()
    if missing > 0:
        alerts.append(
            {
                "type": "attendance",
                "priority": "high",
                "count": missing,
                "message": f"{missing} employee(s) have no attendance marked today",
            }
        )
    if pending_leaves:
        alerts.append(
            {
                "type": "leave",
                "priority": "medium",
                "count": len(pending_leaves),
                "message": f"{len(pending_leaves)} leave request(s) awaiting approval",
            }
        )
    due = reviews_due(active_employees, today)
    if due:
        alerts.append(
            {
                "type": "performance",
                "priority": "medium",
                "count": len(due),
                "message": f"{len(due)} performance review(s) due",
            }
        )

    summaries = summarize_attendance(period_records)
    names = {str(r.employee_id): employee_label(r.employee) for r in period_records}
    top_attendance = [
        dict(summary.as_dict(), name=names.get(summary.employee_id, UNKNOWN_EMPLOYEE))
        for summary in rank_by_attendance(summaries.values())
    ]

    return {
        "period": period,
        "period_start": start,
        "quick_stats": quick_stats,
        "recent_activities": recent_activities,
        "pending_approvals": pending_approvals,
        "alerts": _sort_alerts(alerts),
        "top_attendance": top_attendance,
    }
