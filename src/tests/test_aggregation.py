"""Tests for the pure aggregation helpers behind reports and dashboards."""
from datetime import date, datetime, timezone as dt_timezone
from decimal import Decimal
from types import SimpleNamespace

from goals.models import progress_percentage
from reports.services import (
    AttendanceSummary,
    attendance_rate,
    employee_label,
    exit_stats,
    expense_stats,
    goals_overview,
    leave_day_count,
    leave_status_counts,
    performance_level,
    performance_stats,
    rank_by_attendance,
    reviews_due,
    summarize_attendance,
)


def _record(employee_id, status, minute=0):
    stamp = datetime(2024, 1, 10, 9, minute, tzinfo=dt_timezone.utc)
    return SimpleNamespace(employee_id=employee_id, status=status, created_at=stamp, updated_at=stamp)


class TestAttendance:
    def test_present_present_absent(self):
        summaries = summarize_attendance(
            [_record("e1", "present"), _record("e1", "present"), _record("e1", "absent")]
        )
        summary = summaries["e1"]
        assert (summary.present, summary.absent, summary.leave) == (2, 1, 0)
        assert summary.total == 3
        assert summary.rate == 66.7

    def test_counters_add_up_per_employee(self):
        records = [
            _record("e1", "present"),
            _record("e2", "leave"),
            _record("e1", "leave", minute=5),
            _record("e2", "absent"),
        ]
        summaries = summarize_attendance(records)
        assert list(summaries) == ["e1", "e2"]
        for summary in summaries.values():
            assert summary.present + summary.absent + summary.leave == summary.total
        assert summaries["e1"].last_updated.minute == 5

    def test_unknown_status_is_ignored(self):
        summaries = summarize_attendance([_record("e1", "holiday")])
        assert summaries["e1"].total == 0

    def test_rate_is_zero_without_records(self):
        assert attendance_rate(0, 0) == 0.0
        assert AttendanceSummary(employee_id="x").rate == 0.0

    def test_ranking_is_stable_for_equal_rates(self):
        a = AttendanceSummary(employee_id="a", present=1)
        b = AttendanceSummary(employee_id="b", present=3, absent=1)
        c = AttendanceSummary(employee_id="c", present=2)
        assert [s.employee_id for s in rank_by_attendance([a, b, c])] == ["a", "c", "b"]
        assert len(rank_by_attendance([a, b, c], limit=1)) == 1

    def test_ranking_keeps_top_five(self):
        summaries = [AttendanceSummary(employee_id=str(i), present=i) for i in range(7)]
        ranked = rank_by_attendance(summaries)
        assert len(ranked) == 5
        assert [s.employee_id for s in ranked] == ["1", "2", "3", "4", "5"]


def test_employee_label_fallback():
    assert employee_label(None) == "Unknown"
    assert employee_label(SimpleNamespace(full_name="")) == "Unknown"
    assert employee_label(SimpleNamespace(full_name="Asha Verma")) == "Asha Verma"


def test_leave_helpers():
    assert leave_day_count(date(2024, 1, 10), date(2024, 1, 12)) == 3
    leaves = [SimpleNamespace(status=s) for s in ("pending", "approved", "approved", "rejected")]
    assert leave_status_counts(leaves) == {"pending": 1, "approved": 2, "rejected": 1}


def test_performance_levels_and_stats():
    assert performance_level(Decimal("4.6")) == "Excellent"
    assert performance_level(Decimal("3.5")) == "Good"
    assert performance_level(Decimal("2.5")) == "Average"
    assert performance_level(Decimal("1.0")) == "Needs Improvement"

    reviews = [
        SimpleNamespace(employee_id="e1", overall_rating=Decimal("4.5")),
        SimpleNamespace(employee_id="e1", overall_rating=Decimal("3.0")),
        SimpleNamespace(employee_id="e2", overall_rating=Decimal("2.0")),
    ]
    stats = performance_stats(reviews, active_employee_count=5)
    assert stats["total_reviews"] == 3
    assert stats["average_rating"] == 3.2
    assert stats["distribution"] == {"excellent": 1, "good": 0, "average": 1, "poor": 1}
    assert stats["reviewed_employees"] == 2
    assert stats["pending_reviews"] == 3


def test_expense_and_exit_stats():
    expenses = [
        SimpleNamespace(status="pending", amount=Decimal("100.00")),
        SimpleNamespace(status="approved", amount=Decimal("50.50")),
    ]
    stats = expense_stats(expenses)
    assert stats["total"] == 2
    assert stats["pending_amount"] == Decimal("100.00")
    assert stats["total_amount"] == Decimal("150.50")

    exits = [SimpleNamespace(status=s) for s in ("pending", "in_progress", "completed")]
    assert exit_stats(exits) == {
        "total": 3, "pending": 1, "in_progress": 1, "completed": 1, "rejected": 0, "active": 2,
    }


def test_progress_is_clamped():
    assert progress_percentage(Decimal("150"), Decimal("100")) == 100.0
    assert progress_percentage(Decimal("-5"), Decimal("100")) == 0.0
    assert progress_percentage(Decimal("25"), Decimal("0")) == 0.0
    assert progress_percentage(Decimal("25"), Decimal("50")) == 50.0


def _target(title, current, target, status="active", minute=0):
    employee = SimpleNamespace(full_name="Asha Verma", email="asha@test.com", department="")
    return SimpleNamespace(
        pk=title,
        title=title,
        description="",
        category="",
        status=status,
        current_value=Decimal(current),
        target_value=Decimal(target),
        unit="",
        progress=progress_percentage(Decimal(current), Decimal(target)),
        start_date=None,
        end_date=None,
        employee=employee,
        employee_id="e1",
        created_at=datetime(2024, 1, 1, 10, minute, tzinfo=dt_timezone.utc),
    )


def test_goals_overview_merges_and_sorts():
    goals = [_target("g1", "50", "100", status="completed", minute=1), _target("g2", "0", "10", minute=3)]
    kpis = [_target("k1", "200", "100", minute=2)]
    overview = goals_overview(goals, kpis)
    assert [row["title"] for row in overview["results"]] == ["g2", "k1", "g1"]
    assert overview["results"][1]["type"] == "kpi"
    assert overview["results"][0]["department"] == "N/A"
    assert overview["stats"] == {
        "total_goals": 2,
        "completed_goals": 1,
        "total_kpis": 1,
        "average_progress": 50,
    }


def test_goals_overview_empty():
    assert goals_overview([], [])["stats"]["average_progress"] == 0


def test_reviews_due_every_cycle():
    today = date(2024, 7, 15)
    six = SimpleNamespace(joining_date=date(2024, 1, 15))
    five = SimpleNamespace(joining_date=date(2024, 2, 15))
    new = SimpleNamespace(joining_date=date(2024, 7, 1))
    assert reviews_due([six, five, new], today, cycle_months=6) == [six]


def test_reviews_due_counts_calendar_months():
    joined_late_in_month = SimpleNamespace(joining_date=date(2024, 1, 20))
    assert reviews_due([joined_late_in_month], date(2024, 7, 10), cycle_months=6) == [joined_late_in_month]
