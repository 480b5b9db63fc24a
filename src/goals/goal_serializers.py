"""Serializers for goals and KPIs."""
from rest_framework import serializers

from goals.models import KPI, Goal
from hrm.models import Employee

TARGET_FIELDS = [
    "id", "employee", "employee_name",
    "title", "description", "category",
    "current_value", "target_value", "unit", "progress",
    "status", "start_date", "end_date",
    "created_at", "updated_at",
]


class TrackedTargetSerializer(serializers.ModelSerializer):
    employee = serializers.PrimaryKeyRelatedField(queryset=Employee.objects.all())
    employee_name = serializers.CharField(source="employee.full_name", read_only=True, default=None)
    progress = serializers.SerializerMethodField()

    def get_progress(self, obj):
        return round(obj.progress, 1)

    def validate_title(self, value):
        value = (value or "").strip()
        if not value:
            raise serializers.ValidationError("L'intitule est obligatoire.")
        return value

    def validate_target_value(self, value):
        if value < 0:
            raise serializers.ValidationError("La valeur cible ne peut pas etre negative.")
        return value

    def validate(self, attrs):
        start = attrs.get("start_date", getattr(self.instance, "start_date", None))
        end = attrs.get("end_date", getattr(self.instance, "end_date", None))
        if start and end and end < start:
            raise serializers.ValidationError({"end_date": "La date de fin ne peut pas preceder la date de debut."})
        return attrs


class GoalSerializer(TrackedTargetSerializer):
    class Meta:
        model = Goal
        fields = TARGET_FIELDS
        read_only_fields = ["id", "created_at", "updated_at"]


class KPISerializer(TrackedTargetSerializer):
    class Meta:
        model = KPI
        fields = TARGET_FIELDS[:-2] + ["frequency", "created_at", "updated_at"]
        read_only_fields = ["id", "created_at", "updated_at"]
