"""Account, session and dashboard API views for the HR management system."""
import logging

from django.contrib.auth import get_user_model
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts import services as account_services
from api.v1.pagination import StandardResultsSetPagination
from api.v1.permissions import IsHRAdmin
from api.v1.serializers import (
    ChangePasswordSerializer,
    LinkEmployeeSerializer,
    MeSerializer,
    ResetPasswordSerializer,
    SetRoleSerializer,
    UserCreateSerializer,
    UserSerializer,
)
from reports.services import dashboard_snapshot

logger = logging.getLogger("hrms")

User = get_user_model()


# ---------------------------------------------------------------------------
# User ViewSet (security panel)
# ---------------------------------------------------------------------------

class UserViewSet(
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """
    Portal accounts. Admin only.

    Accounts are never deleted from the API: they are deactivated with
    ``toggle-active``.
    """

    queryset = User.objects.select_related("employee")
    permission_classes = [IsAuthenticated, IsHRAdmin]
    pagination_class = StandardResultsSetPagination
    filterset_fields = ["role", "is_active"]
    search_fields = ["email", "first_name", "last_name", "employee__employee_code"]
    ordering_fields = ["email", "date_joined", "role", "is_active"]

    def get_serializer_class(self):
        if self.action == "create":
            return UserCreateSerializer
        return UserSerializer

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        try:
            user = account_services.create_user_account(
                email=data["email"],
                password=data["password"],
                role=data["role"],
                employee=data.get("employee"),
                created_by=request.user,
            )
        except ValueError as exc:
            raise ValidationError({"detail": str(exc)})
        return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)

    def _run(self, func, *args, **kwargs):
        try:
            user = func(self.get_object(), *args, actor=self.request.user, **kwargs)
        except ValueError as exc:
            raise ValidationError({"detail": str(exc)})
        return Response(UserSerializer(user).data)

    @action(detail=True, methods=["post"], url_path="link-employee")
    def link_employee(self, request, pk=None):
        payload = LinkEmployeeSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        return self._run(account_services.link_employee, payload.validated_data["employee"])

    @action(detail=True, methods=["post"], url_path="unlink-employee")
    def unlink_employee(self, request, pk=None):
        return self._run(account_services.unlink_employee)

    @action(detail=True, methods=["post"], url_path="set-role")
    def set_role(self, request, pk=None):
        payload = SetRoleSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        return self._run(account_services.set_role, payload.validated_data["role"])

    @action(detail=True, methods=["post"], url_path="toggle-active")
    def toggle_active(self, request, pk=None):
        return self._run(account_services.toggle_active)

    @action(detail=True, methods=["post"], url_path="reset-password")
    def reset_password(self, request, pk=None):
        payload = ResetPasswordSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        return self._run(account_services.reset_password, payload.validated_data["new_password"])


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------

class MeView(APIView):
    """
    GET /api/v1/auth/me/ - session context (user, role, linked employee).
    PATCH /api/v1/auth/me/ - update first_name, last_name.
    """

    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response(MeSerializer(request.user).data)

    def patch(self, request):
        serializer = MeSerializer(request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)


class ChangePasswordView(APIView):
    """POST /api/v1/auth/password/change/ - change the authenticated user's password."""

    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = ChangePasswordSerializer(data=request.data, context={"request": request})
        serializer.is_valid(raise_exception=True)
        request.user.set_password(serializer.validated_data["new_password"])
        request.user.save(update_fields=["password"])
        logger.info("Password changed by %s", request.user.email)
        return Response({"detail": "Mot de passe modifie avec succes."})


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------

class DashboardView(APIView):
    """GET /api/v1/dashboard/?period=today|this_week|this_month|this_year - landing figures. Admin only."""

    permission_classes = [IsAuthenticated, IsHRAdmin]

    def get(self, request):
        period = request.query_params.get("period") or "this_month"
        try:
            snapshot = dashboard_snapshot(period=period)
        except ValueError as exc:
            raise ValidationError({"period": str(exc)})
        return Response(snapshot)
