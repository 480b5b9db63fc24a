"""Seed database with demo HR data for development."""
from datetime import timedelta
from decimal import Decimal

from django.core.management.base import BaseCommand

from core.dates import today_local


class Command(BaseCommand):
    help = "Seed database with employees, portal accounts, attendance and leave requests"

    DEMO_EMPLOYEES = [
        {"employee_code": "EMP000001", "first_name": "Asha", "last_name": "Verma", "designation": "HR Manager",
         "department": "Human Resources", "salary": Decimal("85000.00"), "email": "asha.verma@hrms.test"},
        {"employee_code": "EMP000002", "first_name": "Rahul", "last_name": "Mehta", "designation": "Developer",
         "department": "Engineering", "salary": Decimal("72000.00"), "email": "rahul.mehta@hrms.test"},
        {"employee_code": "EMP000003", "first_name": "Priya", "last_name": "Nair", "designation": "Accountant",
         "department": "Finance", "salary": Decimal("64000.00"), "email": "priya.nair@hrms.test"},
    ]

    DEMO_USERS = [
        {"email": "admin@hrms.test", "role": "admin", "password": "admin123!", "employee_code": "EMP000001"},
        {"email": "rahul.mehta@hrms.test", "role": "employee", "password": "employee123!", "employee_code": "EMP000002"},
    ]

    def add_arguments(self, parser):
        parser.add_argument("--flush", action="store_true", help="Delete existing HR data first")
        parser.add_argument(
            "--reset-passwords",
            action="store_true",
            help="Reset demo users passwords to default values.",
        )

    def handle(self, *args, **options):
        if options["flush"]:
            self.stdout.write("Flushing existing data...")
            self._flush()

        self.stdout.write("Seeding data...")
        employees = self._create_employees()
        users = self._create_users(employees, reset_passwords=options["reset_passwords"])
        marked = self._create_attendance(employees, users[0])
        self._create_leaves(employees)

        self.stdout.write(self.style.SUCCESS(
            f"Seed complete: {len(employees)} employees, {len(users)} users, {marked} attendance rows"
        ))

    def _flush(self):
        from accounts.models import User
        from expenses.models import Expense
        from goals.models import KPI, Goal
        from hrm.models import AttendanceRecord, Employee, ExitFormality, LeaveRequest, PerformanceReview

        for model in [Goal, KPI, Expense, ExitFormality, PerformanceReview, LeaveRequest, AttendanceRecord]:
            model.objects.all().delete()
        User.objects.filter(is_superuser=False).delete()
        Employee.objects.all().delete()

    def _create_employees(self):
        from hrm.models import Employee

        today = today_local()
        employees = {}
        for index, data in enumerate(self.DEMO_EMPLOYEES):
            defaults = {key: value for key, value in data.items() if key != "employee_code"}
            defaults["joining_date"] = today - timedelta(days=365 * (index + 1))
            employee, created = Employee.objects.get_or_create(
                employee_code=data["employee_code"],
                defaults=defaults,
            )
            if created:
                self.stdout.write(f"  Employee: {employee.employee_code} {employee.full_name}")
            employees[employee.employee_code] = employee
        return employees

    def _create_users(self, employees, *, reset_passwords: bool = False):
        from accounts.models import User

        created_users = []
        for ud in self.DEMO_USERS:
            employee = employees[ud["employee_code"]]
            user, created = User.objects.get_or_create(
                email=ud["email"],
                defaults={
                    "role": ud["role"],
                    "employee": employee,
                    "first_name": employee.first_name,
                    "last_name": employee.last_name,
                    "is_staff": ud["role"] == "admin",
                },
            )
            if created or reset_passwords:
                user.set_password(ud["password"])
                user.save(update_fields=["password"])
            if created:
                self.stdout.write(f"  User: {user.email} ({ud['role']})")
            created_users.append(user)
        return created_users

    def _create_attendance(self, employees, marked_by):
        from hrm.models import AttendanceRecord
        from hrm.services import mark_attendance

        today = today_local()
        marked = 0
        for offset in range(1, 6):
            day = today - timedelta(days=offset)
            entries = [
                (employee.pk, AttendanceRecord.Status.ABSENT if (offset + i) % 5 == 0 else AttendanceRecord.Status.PRESENT)
                for i, employee in enumerate(employees.values())
            ]
            result = mark_attendance(day=day, entries=entries, marked_by=marked_by)
            marked += result.created + result.updated
        return marked

    def _create_leaves(self, employees):
        from hrm.models import LeaveRequest

        employee = employees["EMP000002"]
        start = today_local() + timedelta(days=7)
        LeaveRequest.objects.get_or_create(
            employee=employee,
            start_date=start,
            defaults={
                "end_date": start + timedelta(days=2),
                "leave_type": LeaveRequest.LeaveType.CASUAL,
                "reason": "Family function",
            },
        )
