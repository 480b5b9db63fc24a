"""HRM API: employees, attendance, leave and performance reviews."""
from datetime import date

import pytest

from hrm.models import AttendanceRecord, Employee, LeaveRequest, PerformanceReview
from hrm.services import sync_leave_attendance


# ---------------------------------------------------------------------------
# Employees
# ---------------------------------------------------------------------------

@pytest.mark.django_db
def test_admin_creates_employee_with_generated_code(admin_client, employee):
    resp = admin_client.post(
        "/api/v1/employees/",
        {
            "first_name": "Asha",
            "last_name": "Verma",
            "email": "asha@test.com",
            "designation": "HR Manager",
            "department": "Human Resources",
            "joining_date": "2024-01-01",
            "bank_name": "SBI",
            "bank_account": "1234567890",
            "bank_ifsc": "SBIN0000001",
        },
        format="json",
    )

    assert resp.status_code == 201, resp.data
    assert resp.data["employee_code"] == "EMP000002"
    created = Employee.objects.get(pk=resp.data["id"])
    assert created.bank_ifsc == "SBIN0000001"


@pytest.mark.django_db
def test_duplicate_employee_code_is_rejected(admin_client, employee):
    resp = admin_client.post(
        "/api/v1/employees/",
        {"employee_code": employee.employee_code, "first_name": "Dup"},
        format="json",
    )
    assert resp.status_code == 400
    assert "employee_code" in resp.data


@pytest.mark.django_db
def test_employee_cannot_create_employee(employee_client):
    resp = employee_client.post("/api/v1/employees/", {"first_name": "X"}, format="json")
    assert resp.status_code == 403


@pytest.mark.django_db
def test_delete_deactivates_employee(admin_client, employee):
    resp = admin_client.delete(f"/api/v1/employees/{employee.id}/")

    assert resp.status_code == 204
    employee.refresh_from_db()
    assert employee.is_active is False


@pytest.mark.django_db
def test_employee_directory_is_scoped_for_employees(employee_client, employee, other_employee):
    resp = employee_client.get("/api/v1/employees/")

    assert resp.status_code == 200
    ids = [row["id"] for row in resp.data["results"]]
    assert ids == [str(employee.id)]


@pytest.mark.django_db
def test_employee_filters_and_search(admin_client, employee, other_employee):
    resp = admin_client.get("/api/v1/employees/", {"department": "Finance"})
    assert [row["id"] for row in resp.data["results"]] == [str(other_employee.id)]

    resp = admin_client.get("/api/v1/employees/", {"search": "Mehta"})
    assert [row["id"] for row in resp.data["results"]] == [str(employee.id)]


@pytest.mark.django_db
def test_employee_tenure(admin_client, employee):
    resp = admin_client.get(f"/api/v1/employees/{employee.id}/tenure/")
    assert resp.status_code == 200
    assert resp.data["tenure"].endswith("m")


# ---------------------------------------------------------------------------
# Attendance
# ---------------------------------------------------------------------------

@pytest.mark.django_db
def test_mark_attendance_updates_in_place(admin_client, employee, other_employee):
    payload = {
        "date": "2024-01-10",
        "entries": [
            {"employee": str(employee.id), "status": "present"},
            {"employee": str(other_employee.id), "status": "absent"},
        ],
    }
    first = admin_client.post("/api/v1/attendance/mark/", payload, format="json")
    assert first.status_code == 201
    assert first.data["created"] == 2

    payload["entries"][1]["status"] = "leave"
    second = admin_client.post("/api/v1/attendance/mark/", payload, format="json")
    assert second.status_code == 200
    assert second.data["updated"] == 2

    assert AttendanceRecord.objects.filter(date=date(2024, 1, 10)).count() == 2
    assert AttendanceRecord.objects.get(employee=other_employee).status == "leave"


@pytest.mark.django_db
def test_mark_attendance_rejects_inactive_employee(admin_client, employee):
    employee.is_active = False
    employee.save()

    resp = admin_client.post(
        "/api/v1/attendance/mark/",
        {"date": "2024-01-10", "entries": [{"employee": str(employee.id), "status": "present"}]},
        format="json",
    )
    assert resp.status_code == 400
    assert AttendanceRecord.objects.count() == 0


@pytest.mark.django_db
def test_employee_cannot_mark_attendance(employee_client, employee):
    resp = employee_client.post(
        "/api/v1/attendance/mark/",
        {"date": "2024-01-10", "entries": [{"employee": str(employee.id), "status": "present"}]},
        format="json",
    )
    assert resp.status_code == 403


@pytest.mark.django_db
def test_attendance_summary(admin_client, admin_user, employee):
    for day, status in [(10, "present"), (11, "present"), (12, "absent")]:
        AttendanceRecord.objects.create(employee=employee, date=date(2024, 1, day), status=status, marked_by=admin_user)

    resp = admin_client.get("/api/v1/attendance/summary/", {"date_from": "2024-01-01", "date_to": "2024-01-31"})

    assert resp.status_code == 200
    row = resp.data["results"][0]
    assert (row["present"], row["absent"], row["leave"], row["total"]) == (2, 1, 0, 3)
    assert row["rate"] == 66.7
    assert row["name"] == "Rahul Mehta"


@pytest.mark.django_db
def test_attendance_summary_rejects_bad_range(admin_client):
    resp = admin_client.get("/api/v1/attendance/summary/", {"date_from": "2024-02-01", "date_to": "2024-01-01"})
    assert resp.status_code == 400


@pytest.mark.django_db
def test_attendance_history_is_own_rows_only(employee_client, employee, other_employee):
    AttendanceRecord.objects.create(employee=employee, date=date(2024, 1, 10), status="present")
    AttendanceRecord.objects.create(employee=other_employee, date=date(2024, 1, 10), status="absent")
    AttendanceRecord.objects.create(employee=employee, date=date(2024, 2, 1), status="present")

    resp = employee_client.get("/api/v1/attendance/history/", {"date": "2024-01-20"})

    assert resp.status_code == 200
    assert len(resp.data["results"]) == 1
    assert resp.data["results"][0]["employee"] == employee.id


# ---------------------------------------------------------------------------
# Leave
# ---------------------------------------------------------------------------

@pytest.mark.django_db
def test_employee_applies_for_own_leave(employee_client, employee, other_employee):
    resp = employee_client.post(
        "/api/v1/leaves/",
        {
            # Ignored: employees always apply for themselves
            "employee": str(other_employee.id),
            "leave_type": "casual",
            "start_date": "2024-01-10",
            "end_date": "2024-01-12",
            "reason": "Family function",
        },
        format="json",
    )

    assert resp.status_code == 201, resp.data
    assert resp.data["status"] == "pending"
    assert resp.data["days"] == 3
    assert LeaveRequest.objects.get().employee == employee


@pytest.mark.django_db
def test_leave_end_before_start_is_rejected(employee_client):
    resp = employee_client.post(
        "/api/v1/leaves/",
        {"leave_type": "sick", "start_date": "2024-01-12", "end_date": "2024-01-10"},
        format="json",
    )
    assert resp.status_code == 400
    assert "end_date" in resp.data


@pytest.mark.django_db
def test_unlinked_account_cannot_apply(unlinked_client):
    resp = unlinked_client.post(
        "/api/v1/leaves/",
        {"leave_type": "sick", "start_date": "2024-01-10", "end_date": "2024-01-10"},
        format="json",
    )
    assert resp.status_code == 403


@pytest.mark.django_db
def test_leave_decision_is_terminal(admin_client, employee):
    leave = LeaveRequest.objects.create(
        employee=employee, leave_type="sick", start_date=date(2024, 1, 10), end_date=date(2024, 1, 11)
    )

    resp = admin_client.post(f"/api/v1/leaves/{leave.id}/approve/", {"comment": "ok"}, format="json")
    assert resp.status_code == 200
    assert resp.data["status"] == "approved"
    assert resp.data["reviewed_by"] is not None

    again = admin_client.post(f"/api/v1/leaves/{leave.id}/reject/", {}, format="json")
    assert again.status_code == 400
    leave.refresh_from_db()
    assert leave.status == "approved"


@pytest.mark.django_db
def test_employee_cannot_approve_leave(employee_client, employee):
    leave = LeaveRequest.objects.create(
        employee=employee, leave_type="sick", start_date=date(2024, 1, 10), end_date=date(2024, 1, 10)
    )
    resp = employee_client.post(f"/api/v1/leaves/{leave.id}/approve/", {}, format="json")
    assert resp.status_code == 403


@pytest.mark.django_db
def test_employee_sees_only_own_leaves(employee_client, employee, other_employee):
    LeaveRequest.objects.create(employee=employee, leave_type="sick", start_date=date(2024, 1, 10), end_date=date(2024, 1, 10))
    LeaveRequest.objects.create(
        employee=other_employee, leave_type="sick", start_date=date(2024, 1, 10), end_date=date(2024, 1, 10)
    )

    resp = employee_client.get("/api/v1/leaves/")
    assert resp.data["count"] == 1


@pytest.mark.django_db
def test_sync_leave_attendance_adds_missing_rows(employee, other_employee):
    day = date(2024, 1, 10)
    LeaveRequest.objects.create(
        employee=employee, leave_type="annual", start_date=date(2024, 1, 9), end_date=date(2024, 1, 11), status="approved"
    )
    LeaveRequest.objects.create(
        employee=other_employee, leave_type="annual", start_date=day, end_date=day, status="pending"
    )

    assert sync_leave_attendance(day) == 1
    assert sync_leave_attendance(day) == 0
    assert AttendanceRecord.objects.get(date=day).status == "leave"


# ---------------------------------------------------------------------------
# Performance reviews
# ---------------------------------------------------------------------------

def _review_payload(employee, **ratings):
    payload = {
        "employee": str(employee.id),
        "reviewer": str(employee.id),
        "review_period_start": "2024-01-01",
        "review_period_end": "2024-06-30",
        "technical_skills": 5,
        "communication": 4,
        "teamwork": 4,
        "leadership": 3,
        "problem_solving": 5,
        "attendance_punctuality": 4,
        "goals_achievement": 4,
    }
    payload.update(ratings)
    return payload


@pytest.mark.django_db
def test_review_overall_rating_is_computed(admin_client, employee):
    resp = admin_client.post("/api/v1/performance-reviews/", _review_payload(employee), format="json")

    assert resp.status_code == 201, resp.data
    # (5+4+4+3+5+4+4) / 7 = 4.14
    assert resp.data["overall_rating"] == "4.1"
    assert resp.data["performance_level"] == "Good"


@pytest.mark.django_db
def test_review_rating_out_of_range(admin_client, employee):
    resp = admin_client.post(
        "/api/v1/performance-reviews/", _review_payload(employee, leadership=6), format="json"
    )
    assert resp.status_code == 400
    assert "leadership" in resp.data


@pytest.mark.django_db
def test_reviews_are_immutable(admin_client, employee):
    review = PerformanceReview.objects.create(
        employee=employee, review_period_start=date(2024, 1, 1), review_period_end=date(2024, 6, 30)
    )
    resp = admin_client.patch(f"/api/v1/performance-reviews/{review.id}/", {"comments": "x"}, format="json")
    assert resp.status_code == 405


@pytest.mark.django_db
def test_review_stats(admin_client, employee, other_employee):
    PerformanceReview.objects.create(
        employee=employee, review_period_start=date(2024, 1, 1), review_period_end=date(2024, 6, 30)
    )

    resp = admin_client.get("/api/v1/performance-reviews/stats/")

    assert resp.status_code == 200
    assert resp.data["total_reviews"] == 1
    assert resp.data["average_rating"] == 3.0
    assert resp.data["pending_reviews"] == 1
