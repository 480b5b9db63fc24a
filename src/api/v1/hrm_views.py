"""ViewSets for the HRM module."""
from datetime import date

from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from api.v1.pagination import StandardResultsSetPagination
from api.v1.permissions import (
    IsHRAdmin,
    IsLinkedEmployeeOrHRAdmin,
    is_hr_admin,
    linked_employee_id,
    scope_to_user,
)
from core.dates import month_bounds, tenure_label, today_local
from hrm.models import AttendanceRecord, Employee, ExitFormality, LeaveRequest, PerformanceReview
from hrm.serializers import (
    AttendanceMarkSerializer,
    AttendanceRecordSerializer,
    DecisionCommentSerializer,
    EmployeeCreateSerializer,
    EmployeeDetailSerializer,
    EmployeeListSerializer,
    ExitFormalitySerializer,
    LeaveRequestSerializer,
    PerformanceReviewSerializer,
)
from hrm.services import (
    complete_exit,
    deactivate_employee,
    decide_leave,
    mark_attendance,
    reject_exit,
    start_exit_process,
)
from reports.services import (
    EXIT_TABS,
    employee_label,
    exit_stats,
    performance_stats,
    summarize_attendance,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _date_param(request, name, default=None):
    raw = request.query_params.get(name)
    if not raw:
        return default
    try:
        return date.fromisoformat(raw)
    except ValueError:
        raise ValidationError({name: "Format de date invalide. Utilisez YYYY-MM-DD."})


# ---------------------------------------------------------------------------
# Employee
# ---------------------------------------------------------------------------

class EmployeeViewSet(viewsets.ModelViewSet):
    """Annuaire et recrutement. DELETE desactive l'employe."""

    queryset = Employee.objects.all()
    pagination_class = StandardResultsSetPagination
    filterset_fields = ["department", "designation", "is_active"]
    search_fields = ["first_name", "last_name", "employee_code", "email", "phone", "designation", "department"]
    ordering_fields = ["first_name", "last_name", "joining_date", "created_at"]

    def get_serializer_class(self):
        if self.action == "create":
            return EmployeeCreateSerializer
        if self.action == "list":
            return EmployeeListSerializer
        return EmployeeDetailSerializer

    def get_permissions(self):
        if self.action in ("create", "update", "partial_update", "destroy"):
            return [IsAuthenticated(), IsHRAdmin()]
        return [IsAuthenticated()]

    def get_queryset(self):
        qs = super().get_queryset()
        if is_hr_admin(self.request.user):
            return qs
        employee_id = linked_employee_id(self.request.user)
        return qs.filter(pk=employee_id) if employee_id else qs.none()

    def destroy(self, request, *args, **kwargs):
        deactivate_employee(self.get_object(), actor=request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["get"])
    def tenure(self, request, pk=None):
        employee = self.get_object()
        return Response(
            {
                "employee": str(employee.pk),
                "joining_date": employee.joining_date,
                "tenure": tenure_label(employee.joining_date),
            }
        )


# ---------------------------------------------------------------------------
# Attendance
# ---------------------------------------------------------------------------

class AttendanceViewSet(viewsets.ModelViewSet):
    """Pointages journaliers (une ligne par employe et par jour)."""

    serializer_class = AttendanceRecordSerializer
    queryset = AttendanceRecord.objects.select_related("employee", "marked_by")
    pagination_class = StandardResultsSetPagination
    filterset_fields = ["status", "employee", "date"]
    search_fields = ["employee__first_name", "employee__last_name", "employee__employee_code"]
    ordering_fields = ["date", "created_at", "updated_at"]

    def get_permissions(self):
        if self.action in ("create", "update", "partial_update", "destroy", "mark"):
            return [IsAuthenticated(), IsHRAdmin()]
        return [IsAuthenticated()]

    def get_queryset(self):
        return scope_to_user(super().get_queryset(), self.request.user)

    def perform_create(self, serializer):
        serializer.save(marked_by=self.request.user)

    def perform_update(self, serializer):
        serializer.save(marked_by=self.request.user)

    @action(detail=False, methods=["post"])
    def mark(self, request):
        """Saisie en masse des pointages d'une journee."""
        serializer = AttendanceMarkSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        try:
            result = mark_attendance(
                day=data["date"],
                entries=[(entry["employee"], entry["status"]) for entry in data["entries"]],
                marked_by=request.user,
            )
        except ValueError as exc:
            raise ValidationError({"detail": str(exc)})
        return Response(
            {"created": result.created, "updated": result.updated, "records": result.record_ids},
            status=status.HTTP_201_CREATED if result.created else status.HTTP_200_OK,
        )

    @action(detail=False, methods=["get"])
    def summary(self, request):
        """Compteurs par employe sur une periode (mois courant par defaut)."""
        default_start, default_end = month_bounds(today_local())
        date_from = _date_param(request, "date_from", default_start)
        date_to = _date_param(request, "date_to", default_end)
        if date_to < date_from:
            raise ValidationError({"date_to": "La date de fin ne peut pas preceder la date de debut."})

        records = list(self.get_queryset().filter(date__range=(date_from, date_to)).order_by("date", "created_at"))
        names = {str(r.employee_id): employee_label(r.employee) for r in records}
        summaries = summarize_attendance(records)
        return Response(
            {
                "date_from": date_from,
                "date_to": date_to,
                "results": [
                    dict(summary.as_dict(), name=names.get(employee_id))
                    for employee_id, summary in summaries.items()
                ],
            }
        )

    @action(detail=False, methods=["get"])
    def history(self, request):
        """Pointages du mois contenant ``date``."""
        day = _date_param(request, "date", today_local())
        period_start, period_end = month_bounds(day)
        qs = self.get_queryset().filter(date__range=(period_start, period_end)).order_by("-date", "employee__first_name")
        return Response(
            {
                "period_start": period_start,
                "period_end": period_end,
                "results": self.get_serializer(qs, many=True).data,
            }
        )


# ---------------------------------------------------------------------------
# Leave
# ---------------------------------------------------------------------------

class LeaveRequestViewSet(
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """Demandes de conge : depot par l'employe, decision par un administrateur."""

    serializer_class = LeaveRequestSerializer
    queryset = LeaveRequest.objects.select_related("employee", "reviewed_by")
    pagination_class = StandardResultsSetPagination
    filterset_fields = ["status", "employee", "leave_type"]
    search_fields = ["employee__first_name", "employee__last_name", "reason"]
    ordering_fields = ["start_date", "created_at"]

    def get_permissions(self):
        if self.action in ("approve", "reject"):
            return [IsAuthenticated(), IsHRAdmin()]
        if self.action == "create":
            return [IsAuthenticated(), IsLinkedEmployeeOrHRAdmin()]
        return [IsAuthenticated()]

    def get_queryset(self):
        return scope_to_user(super().get_queryset(), self.request.user)

    def perform_create(self, serializer):
        user = self.request.user
        if is_hr_admin(user):
            if "employee" not in serializer.validated_data:
                raise ValidationError({"employee": "Ce champ est obligatoire."})
            serializer.save()
            return
        own = Employee.objects.filter(pk=linked_employee_id(user), is_active=True).first()
        if own is None:
            raise ValidationError({"employee": "Votre fiche employe est inactive."})
        serializer.save(employee=own)

    def _decide(self, request, approve):
        payload = DecisionCommentSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        try:
            leave = decide_leave(
                self.get_object(),
                approve=approve,
                reviewer=request.user,
                comment=payload.validated_data["comment"],
            )
        except ValueError as exc:
            raise ValidationError({"detail": str(exc)})
        return Response(LeaveRequestSerializer(leave).data)

    @action(detail=True, methods=["post"])
    def approve(self, request, pk=None):
        """Approuver une demande de conge."""
        return self._decide(request, approve=True)

    @action(detail=True, methods=["post"])
    def reject(self, request, pk=None):
        """Rejeter une demande de conge."""
        return self._decide(request, approve=False)


# ---------------------------------------------------------------------------
# Performance
# ---------------------------------------------------------------------------

class PerformanceReviewViewSet(
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """Evaluations : creees une fois par cycle, jamais modifiees."""

    serializer_class = PerformanceReviewSerializer
    queryset = PerformanceReview.objects.select_related("employee", "reviewer")
    pagination_class = StandardResultsSetPagination
    filterset_fields = ["employee", "reviewer"]
    search_fields = ["employee__first_name", "employee__last_name"]
    ordering_fields = ["review_period_end", "overall_rating", "created_at"]

    def get_permissions(self):
        if self.action == "create":
            return [IsAuthenticated(), IsHRAdmin()]
        return [IsAuthenticated()]

    def get_queryset(self):
        return scope_to_user(super().get_queryset(), self.request.user)

    @action(detail=False, methods=["get"])
    def stats(self, request):
        reviews = self.get_queryset()
        if is_hr_admin(request.user):
            active = Employee.objects.filter(is_active=True).count()
        else:
            active = 1 if linked_employee_id(request.user) else 0
        return Response(performance_stats(reviews, active))


# ---------------------------------------------------------------------------
# Exit formalities
# ---------------------------------------------------------------------------

class ExitFormalityViewSet(viewsets.ModelViewSet):
    """Dossiers de depart geres par les RH."""

    serializer_class = ExitFormalitySerializer
    queryset = ExitFormality.objects.select_related("employee")
    pagination_class = StandardResultsSetPagination
    filterset_fields = ["status", "exit_reason", "employee"]
    search_fields = ["employee__first_name", "employee__last_name", "reason_details"]
    ordering_fields = ["resignation_date", "last_working_day", "created_at"]
    permission_classes = [IsAuthenticated, IsHRAdmin]

    def get_queryset(self):
        qs = super().get_queryset()
        tab = self.request.query_params.get("tab")
        if tab:
            if tab not in EXIT_TABS:
                raise ValidationError({"tab": f"Valeurs possibles : {', '.join(EXIT_TABS)}."})
            qs = qs.filter(status__in=EXIT_TABS[tab])
        return qs

    def perform_update(self, serializer):
        if serializer.instance.is_closed:
            raise ValidationError({"detail": "Ce dossier est cloture et ne peut plus etre modifie."})
        serializer.save()

    def destroy(self, request, *args, **kwargs):
        instance = self.get_object()
        if instance.status != ExitFormality.Status.PENDING:
            raise ValidationError({"detail": "Seules les demandes en attente peuvent etre supprimees."})
        instance.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["post"])
    def start(self, request, pk=None):
        try:
            exit_formality = start_exit_process(self.get_object(), actor=request.user)
        except ValueError as exc:
            raise ValidationError({"detail": str(exc)})
        return Response(self.get_serializer(exit_formality).data)

    @action(detail=True, methods=["post"])
    def reject(self, request, pk=None):
        try:
            exit_formality = reject_exit(self.get_object(), actor=request.user, notes=request.data.get("notes", ""))
        except ValueError as exc:
            raise ValidationError({"detail": str(exc)})
        return Response(self.get_serializer(exit_formality).data)

    @action(detail=True, methods=["post"])
    def complete(self, request, pk=None):
        try:
            exit_formality = complete_exit(self.get_object(), actor=request.user)
        except ValueError as exc:
            raise ValidationError({"detail": str(exc)})
        return Response(self.get_serializer(exit_formality).data)

    @action(detail=False, methods=["get"])
    def stats(self, request):
        return Response(exit_stats(ExitFormality.objects.all()))
