"""Serializers for accounts, the session context and the security panel."""
from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

from hrm.models import Employee

User = get_user_model()


# ---------------------------------------------------------------------------
# Users (security panel)
# ---------------------------------------------------------------------------

class UserSerializer(serializers.ModelSerializer):
    """Read serializer for User model."""

    employee_name = serializers.CharField(source="employee.full_name", read_only=True, default=None)
    employee_code = serializers.CharField(source="employee.employee_code", read_only=True, default=None)
    role_display = serializers.CharField(read_only=True)

    class Meta:
        model = User
        fields = [
            "id", "email", "first_name", "last_name",
            "role", "role_display", "employee", "employee_name", "employee_code",
            "is_active", "date_joined", "last_login",
        ]
        read_only_fields = fields


class UserCreateSerializer(serializers.Serializer):
    """Account creation with password confirmation and optional employee link."""

    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, min_length=8)
    password_confirm = serializers.CharField(write_only=True, min_length=8)
    role = serializers.ChoiceField(choices=User.Role.choices, default=User.Role.EMPLOYEE)
    employee = serializers.PrimaryKeyRelatedField(
        queryset=Employee.objects.filter(is_active=True),
        required=False,
        allow_null=True,
    )

    def validate_email(self, value):
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("Un utilisateur avec cette adresse e-mail existe deja.")
        return value

    def validate(self, attrs):
        if attrs["password"] != attrs["password_confirm"]:
            raise serializers.ValidationError(
                {"password_confirm": "Les mots de passe ne correspondent pas."}
            )
        return attrs


class LinkEmployeeSerializer(serializers.Serializer):
    employee = serializers.PrimaryKeyRelatedField(queryset=Employee.objects.filter(is_active=True))


class SetRoleSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=User.Role.choices)


class ResetPasswordSerializer(serializers.Serializer):
    new_password = serializers.CharField(write_only=True, min_length=8)


# ---------------------------------------------------------------------------
# Session context
# ---------------------------------------------------------------------------

class MeSerializer(serializers.ModelSerializer):
    """The authenticated user's own profile, role and linked employee.

    Includes ``is_superuser`` because this is the user's own data.
    """

    employee = serializers.SerializerMethodField()
    is_admin = serializers.BooleanField(read_only=True)

    class Meta:
        model = User
        fields = [
            "id", "email", "first_name", "last_name",
            "role", "is_admin", "is_active", "is_superuser", "employee",
        ]
        read_only_fields = ["id", "email", "role", "is_admin", "is_active", "is_superuser", "employee"]

    def get_employee(self, obj):
        employee = obj.employee
        if employee is None:
            return None
        return {
            "id": str(employee.pk),
            "employee_code": employee.employee_code,
            "full_name": employee.full_name,
            "designation": employee.designation,
            "department": employee.department,
            "is_active": employee.is_active,
        }


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    """Extends JWT token response to include the session context."""

    def validate(self, attrs):
        data = super().validate(attrs)
        data["user"] = MeSerializer(self.user).data
        return data


class ChangePasswordSerializer(serializers.Serializer):
    old_password = serializers.CharField(required=True, write_only=True)
    new_password = serializers.CharField(required=True, min_length=8, write_only=True)

    def validate_old_password(self, value):
        user = self.context["request"].user
        if not user.check_password(value):
            raise serializers.ValidationError("Mot de passe actuel incorrect.")
        return value

    def validate_new_password(self, value):
        user = self.context["request"].user
        try:
            validate_password(value, user=user)
        except DjangoValidationError as exc:
            raise serializers.ValidationError(list(exc.messages))
        return value
