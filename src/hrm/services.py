"""Business services for employees, attendance, leave and exit workflows."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import date

from django.db import IntegrityError, transaction
from django.utils import timezone

from hrm.models import AttendanceRecord, Employee, ExitFormality, LeaveRequest

logger = logging.getLogger("hrms")

EMPLOYEE_CODE_PREFIX = "EMP"
_CODE_RE = re.compile(rf"^{EMPLOYEE_CODE_PREFIX}(\d+)$")


@dataclass
class AttendanceMarkResult:
    """Outcome of a bulk attendance submission."""

    created: int = 0
    updated: int = 0
    record_ids: list[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Employees
# ---------------------------------------------------------------------------

def generate_employee_code() -> str:
    """Next sequential code ``EMP000001``, ``EMP000002``..."""
    highest = 0
    for code in Employee.objects.filter(employee_code__startswith=EMPLOYEE_CODE_PREFIX).values_list(
        "employee_code", flat=True
    ):
        match = _CODE_RE.match(code)
        if match:
            highest = max(highest, int(match.group(1)))
    return f"{EMPLOYEE_CODE_PREFIX}{highest + 1:06d}"


def create_employee(**data) -> Employee:
    """Recruitment: insert one employee row, generating the code when omitted."""
    code = (data.pop("employee_code", "") or "").strip()
    if code:
        employee = Employee.objects.create(employee_code=code, **data)
    else:
        employee = None
        for _attempt in range(3):
            try:
                with transaction.atomic():
                    employee = Employee.objects.create(employee_code=generate_employee_code(), **data)
                break
            except IntegrityError:
                # Concurrent recruitment took the same code.
                continue
        if employee is None:
            raise ValueError("Impossible de generer le matricule. Reessayez.")

    logger.info("Employee created: %s %s", employee.employee_code, employee.full_name)
    return employee


def deactivate_employee(employee: Employee, *, actor=None) -> Employee:
    """Soft delete."""
    if not employee.is_active:
        return employee
    employee.is_active = False
    employee.save(update_fields=["is_active", "updated_at"])
    logger.info("Employee deactivated: %s by=%s", employee.employee_code, actor)
    return employee


# ---------------------------------------------------------------------------
# Attendance
# ---------------------------------------------------------------------------

@transaction.atomic
def mark_attendance(*, day: date, entries, marked_by=None) -> AttendanceMarkResult:
    """Record the status of several employees for *day*.

    *entries* is an iterable of ``(employee_id, status)``. An existing row for
    the same employee and day is updated in place.
    """
    entries = list(entries)
    if not entries:
        raise ValueError("Aucun pointage a enregistrer.")

    valid_statuses = set(AttendanceRecord.Status.values)
    employee_ids = {str(employee_id) for employee_id, _status in entries}
    employees = {
        str(emp.pk): emp
        for emp in Employee.objects.filter(pk__in=employee_ids, is_active=True)
    }
    unknown = employee_ids - set(employees)
    if unknown:
        raise ValueError("Un ou plusieurs employes sont invalides ou inactifs.")

    result = AttendanceMarkResult()
    for employee_id, status in entries:
        if status not in valid_statuses:
            raise ValueError(f"Statut de pointage invalide : {status}.")
        record, created = AttendanceRecord.objects.update_or_create(
            employee=employees[str(employee_id)],
            date=day,
            defaults={"status": status, "marked_by": marked_by},
        )
        if created:
            result.created += 1
        else:
            result.updated += 1
        result.record_ids.append(str(record.pk))

    logger.info(
        "Attendance marked for %s: created=%s updated=%s by=%s",
        day,
        result.created,
        result.updated,
        marked_by,
    )
    return result


def sync_leave_attendance(day: date) -> int:
    """Create ``leave`` rows for employees on approved leave *day* with no row yet."""
    created = 0
    leaves = LeaveRequest.objects.filter(
        status=LeaveRequest.Status.APPROVED,
        start_date__lte=day,
        end_date__gte=day,
        employee__is_active=True,
    ).select_related("employee")
    for leave in leaves:
        _record, was_created = AttendanceRecord.objects.get_or_create(
            employee=leave.employee,
            date=day,
            defaults={"status": AttendanceRecord.Status.LEAVE},
        )
        if was_created:
            created += 1
    if created:
        logger.info("Leave attendance synced for %s: %s rows", day, created)
    return created


# ---------------------------------------------------------------------------
# Leave
# ---------------------------------------------------------------------------

@transaction.atomic
def decide_leave(leave: LeaveRequest, *, approve: bool, reviewer, comment: str = "") -> LeaveRequest:
    """Move a pending leave request to approved or rejected."""
    locked = LeaveRequest.objects.select_for_update().select_related("employee").get(pk=leave.pk)
    if locked.status != LeaveRequest.Status.PENDING:
        raise ValueError("Cette demande n'est plus en attente.")

    locked.status = LeaveRequest.Status.APPROVED if approve else LeaveRequest.Status.REJECTED
    locked.reviewed_by = reviewer
    locked.reviewed_at = timezone.now()
    locked.review_comment = (comment or "").strip()
    locked.save(update_fields=["status", "reviewed_by", "reviewed_at", "review_comment", "updated_at"])

    logger.info(
        "Leave %s: %s %s→%s by=%s",
        locked.status,
        locked.employee.employee_code,
        locked.start_date,
        locked.end_date,
        reviewer,
    )
    return locked


# ---------------------------------------------------------------------------
# Exit formalities
# ---------------------------------------------------------------------------

def _lock_exit(exit_formality: ExitFormality) -> ExitFormality:
    return ExitFormality.objects.select_for_update().select_related("employee").get(pk=exit_formality.pk)


@transaction.atomic
def start_exit_process(exit_formality: ExitFormality, *, actor=None) -> ExitFormality:
    locked = _lock_exit(exit_formality)
    if locked.status != ExitFormality.Status.PENDING:
        raise ValueError("Seules les demandes en attente peuvent etre demarrees.")
    locked.status = ExitFormality.Status.IN_PROGRESS
    locked.save(update_fields=["status", "updated_at"])
    logger.info("Exit process started: %s by=%s", locked.employee.employee_code, actor)
    return locked


@transaction.atomic
def reject_exit(exit_formality: ExitFormality, *, actor=None, notes: str = "") -> ExitFormality:
    locked = _lock_exit(exit_formality)
    if locked.status != ExitFormality.Status.PENDING:
        raise ValueError("Seules les demandes en attente peuvent etre rejetees.")
    locked.status = ExitFormality.Status.REJECTED
    update_fields = ["status", "updated_at"]
    if notes:
        locked.notes = f"{locked.notes}\n{notes}".strip()
        update_fields.append("notes")
    locked.save(update_fields=update_fields)
    logger.info("Exit request rejected: %s by=%s", locked.employee.employee_code, actor)
    return locked


@transaction.atomic
def complete_exit(exit_formality: ExitFormality, *, actor=None) -> ExitFormality:
    """Close an in-progress exit once every clearance is signed off."""
    locked = _lock_exit(exit_formality)
    if locked.status != ExitFormality.Status.IN_PROGRESS:
        raise ValueError("Seul un dossier en cours peut etre termine.")
    if not locked.all_cleared:
        missing = [name for name, done in locked.clearances.items() if not done]
        raise ValueError(f"Validations manquantes : {', '.join(missing)}.")

    locked.status = ExitFormality.Status.COMPLETED
    locked.completed_at = timezone.now()
    locked.save(update_fields=["status", "completed_at", "updated_at"])
    logger.info(
        "Exit completed: %s settlement=%s by=%s",
        locked.employee.employee_code,
        locked.settlement_total,
        actor,
    )
    return locked
