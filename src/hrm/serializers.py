"""Serializers for the HRM module."""
from rest_framework import serializers

from core.dates import tenure_label
from hrm.models import AttendanceRecord, Employee, ExitFormality, LeaveRequest, PerformanceReview
from hrm.services import create_employee
from reports.services import performance_level


# ---------------------------------------------------------------------------
# Employee
# ---------------------------------------------------------------------------

class EmployeeListSerializer(serializers.ModelSerializer):
    """Serializer leger pour l'annuaire."""
    full_name = serializers.CharField(read_only=True)
    tenure = serializers.SerializerMethodField()

    class Meta:
        model = Employee
        fields = [
            "id", "employee_code", "first_name", "last_name", "full_name",
            "email", "phone", "designation", "department", "joining_date",
            "tenure", "is_active",
        ]

    def get_tenure(self, obj):
        return tenure_label(obj.joining_date)


class EmployeeDetailSerializer(serializers.ModelSerializer):
    full_name = serializers.CharField(read_only=True)
    tenure = serializers.SerializerMethodField()
    has_account = serializers.SerializerMethodField()

    class Meta:
        model = Employee
        fields = [
            "id", "employee_code", "first_name", "last_name", "full_name",
            "email", "phone", "designation", "department", "salary",
            "joining_date", "tenure", "photo",
            "date_of_birth", "wedding_anniversary",
            "pan", "aadhar", "passport",
            "bank_name", "bank_account", "bank_ifsc",
            "emergency_contact",
            "probation_period_months", "confirmation_date",
            "address_permanent", "address_current",
            "is_active", "has_account",
            "created_at", "updated_at",
        ]
        read_only_fields = ["id", "employee_code", "created_at", "updated_at"]

    def get_tenure(self, obj):
        return tenure_label(obj.joining_date)

    def get_has_account(self, obj):
        return hasattr(obj, "user_account")


class EmployeeCreateSerializer(EmployeeDetailSerializer):
    """Recrutement : le matricule est genere s'il n'est pas fourni."""

    employee_code = serializers.CharField(max_length=30, required=False, allow_blank=True)

    class Meta(EmployeeDetailSerializer.Meta):
        read_only_fields = ["id", "created_at", "updated_at"]

    def validate_employee_code(self, value):
        value = (value or "").strip()
        if value and Employee.objects.filter(employee_code=value).exists():
            raise serializers.ValidationError("Ce matricule est deja utilise.")
        return value

    def create(self, validated_data):
        try:
            return create_employee(**validated_data)
        except ValueError as exc:
            raise serializers.ValidationError({"detail": str(exc)})


# ---------------------------------------------------------------------------
# Attendance
# ---------------------------------------------------------------------------

class AttendanceRecordSerializer(serializers.ModelSerializer):
    employee_name = serializers.CharField(source="employee.full_name", read_only=True, default=None)
    employee_code = serializers.CharField(source="employee.employee_code", read_only=True, default=None)
    marked_by_email = serializers.CharField(source="marked_by.email", read_only=True, default=None)

    class Meta:
        model = AttendanceRecord
        fields = [
            "id", "employee", "employee_name", "employee_code", "date", "status",
            "marked_by", "marked_by_email", "created_at", "updated_at",
        ]
        read_only_fields = ["id", "marked_by", "created_at", "updated_at"]


class AttendanceEntrySerializer(serializers.Serializer):
    employee = serializers.UUIDField()
    status = serializers.ChoiceField(choices=AttendanceRecord.Status.choices)


class AttendanceMarkSerializer(serializers.Serializer):
    date = serializers.DateField()
    entries = AttendanceEntrySerializer(many=True, allow_empty=False)


# ---------------------------------------------------------------------------
# Leave
# ---------------------------------------------------------------------------

class LeaveRequestSerializer(serializers.ModelSerializer):
    employee_name = serializers.CharField(source="employee.full_name", read_only=True, default=None)
    reviewed_by_email = serializers.CharField(source="reviewed_by.email", read_only=True, default=None)
    days = serializers.IntegerField(read_only=True)
    employee = serializers.PrimaryKeyRelatedField(
        queryset=Employee.objects.filter(is_active=True),
        required=False,
    )

    class Meta:
        model = LeaveRequest
        fields = [
            "id", "employee", "employee_name", "leave_type", "start_date", "end_date",
            "days", "reason", "status", "reviewed_by", "reviewed_by_email",
            "reviewed_at", "review_comment", "created_at", "updated_at",
        ]
        read_only_fields = [
            "id", "status", "reviewed_by", "reviewed_at", "review_comment",
            "created_at", "updated_at",
        ]

    def validate_reason(self, value):
        return (value or "").strip()

    def validate(self, attrs):
        start = attrs.get("start_date")
        end = attrs.get("end_date")
        if start and end and end < start:
            raise serializers.ValidationError({"end_date": "La date de fin ne peut pas preceder la date de debut."})
        return attrs


class DecisionCommentSerializer(serializers.Serializer):
    comment = serializers.CharField(required=False, allow_blank=True, default="")


# ---------------------------------------------------------------------------
# Performance
# ---------------------------------------------------------------------------

class PerformanceReviewSerializer(serializers.ModelSerializer):
    employee_name = serializers.CharField(source="employee.full_name", read_only=True, default=None)
    reviewer_name = serializers.CharField(source="reviewer.full_name", read_only=True, default=None)
    performance_level = serializers.SerializerMethodField()

    class Meta:
        model = PerformanceReview
        fields = [
            "id", "employee", "employee_name", "reviewer", "reviewer_name",
            "review_period_start", "review_period_end",
            "technical_skills", "communication", "teamwork", "leadership",
            "problem_solving", "attendance_punctuality", "goals_achievement",
            "overall_rating", "performance_level",
            "comments", "strengths", "improvement_areas", "goals_next_period",
            "created_at", "updated_at",
        ]
        read_only_fields = ["id", "overall_rating", "created_at", "updated_at"]

    def get_performance_level(self, obj):
        return performance_level(obj.overall_rating)

    def validate(self, attrs):
        start = attrs.get("review_period_start")
        end = attrs.get("review_period_end")
        if start and end and end < start:
            raise serializers.ValidationError(
                {"review_period_end": "La fin de periode ne peut pas preceder le debut."}
            )
        return attrs


# ---------------------------------------------------------------------------
# Exit formalities
# ---------------------------------------------------------------------------

class ExitFormalitySerializer(serializers.ModelSerializer):
    employee_name = serializers.CharField(source="employee.full_name", read_only=True, default=None)
    clearance_progress = serializers.IntegerField(read_only=True)
    settlement_total = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = ExitFormality
        fields = [
            "id", "employee", "employee_name",
            "resignation_date", "last_working_day", "exit_reason", "reason_details",
            "notice_period_days", "status",
            "it_clearance", "hr_clearance", "finance_clearance", "admin_clearance",
            "project_handover", "asset_return", "knowledge_transfer", "exit_interview",
            "clearance_progress",
            "pending_salary", "bonus_amount", "leave_encashment", "gratuity_amount",
            "deductions", "settlement_total",
            "notes", "completed_at", "created_at", "updated_at",
        ]
        read_only_fields = ["id", "status", "completed_at", "created_at", "updated_at"]

    def validate(self, attrs):
        instance = self.instance
        resignation = attrs.get("resignation_date", getattr(instance, "resignation_date", None))
        last_day = attrs.get("last_working_day", getattr(instance, "last_working_day", None))
        if resignation and last_day and last_day < resignation:
            raise serializers.ValidationError(
                {"last_working_day": "Le dernier jour ne peut pas preceder la date de demission."}
            )
        if instance is not None and "employee" in attrs and attrs["employee"] != instance.employee:
            raise serializers.ValidationError({"employee": "L'employe ne peut pas etre modifie."})
        return attrs
