"""API views for goals and KPIs."""
from __future__ import annotations

import logging
import uuid

from rest_framework import viewsets
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from api.v1.pagination import StandardResultsSetPagination
from api.v1.permissions import IsHRAdminOrReadOnly, scope_to_user
from goals.goal_serializers import GoalSerializer, KPISerializer
from goals.models import KPI, Goal, TrackedTarget
from reports.services import goals_overview

logger = logging.getLogger("hrms")


class _TrackedTargetViewSet(viewsets.ModelViewSet):
    permission_classes = [IsAuthenticated, IsHRAdminOrReadOnly]
    pagination_class = StandardResultsSetPagination
    filterset_fields = ["employee", "status", "category"]
    search_fields = ["title", "description", "category", "employee__first_name", "employee__last_name"]
    ordering_fields = ["created_at", "end_date", "title"]

    def get_queryset(self):
        return scope_to_user(super().get_queryset(), self.request.user)

    def perform_create(self, serializer):
        item = serializer.save()
        logger.info("%s created: %s employee=%s", item._meta.verbose_name, item.pk, item.employee_id)


class GoalViewSet(_TrackedTargetViewSet):
    serializer_class = GoalSerializer
    queryset = Goal.objects.select_related("employee")


class KPIViewSet(_TrackedTargetViewSet):
    serializer_class = KPISerializer
    queryset = KPI.objects.select_related("employee")
    filterset_fields = _TrackedTargetViewSet.filterset_fields + ["frequency"]


class GoalsOverviewView(APIView):
    """Goals and KPIs in one listing.

    Query parameters: ``type`` (goal|kpi), ``status``, ``employee`` and
    ``department``. Stats are computed on the filtered rows.
    """

    permission_classes = [IsAuthenticated]

    def get(self, request):
        params = request.query_params
        kind = params.get("type")
        goals = scope_to_user(Goal.objects.select_related("employee"), request.user)
        kpis = scope_to_user(KPI.objects.select_related("employee"), request.user)

        status_filter = params.get("status")
        if status_filter in TrackedTarget.Status.values:
            goals = goals.filter(status=status_filter)
            kpis = kpis.filter(status=status_filter)
        if params.get("employee"):
            try:
                employee_id = uuid.UUID(params["employee"])
            except ValueError:
                raise ValidationError({"employee": "Identifiant invalide."})
            goals = goals.filter(employee_id=employee_id)
            kpis = kpis.filter(employee_id=employee_id)
        if params.get("department"):
            goals = goals.filter(employee__department__iexact=params["department"])
            kpis = kpis.filter(employee__department__iexact=params["department"])

        if kind == "goal":
            kpis = kpis.none()
        elif kind == "kpi":
            goals = goals.none()
        return Response(goals_overview(goals, kpis))
