"""ViewSets and endpoints for the expenses module."""
from __future__ import annotations

from decimal import Decimal, InvalidOperation

from django.db.models import Q
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from api.v1.expense_serializers import ExpenseApproveSerializer, ExpenseRejectSerializer, ExpenseSerializer
from api.v1.pagination import StandardResultsSetPagination
from api.v1.permissions import IsHRAdmin, IsLinkedEmployeeOrHRAdmin, is_hr_admin, linked_employee_id, scope_to_user
from expenses.models import Expense
from expenses.services import approve_expense, create_expense, reject_expense
from hrm.models import Employee
from reports.services import expense_stats


def _search_expenses(qs, term):
    """Match description, employee name/email, or the exact amount."""
    term = (term or "").strip()
    if not term:
        return qs
    condition = (
        Q(description__icontains=term)
        | Q(employee__first_name__icontains=term)
        | Q(employee__last_name__icontains=term)
        | Q(employee__email__icontains=term)
    )
    try:
        amount = Decimal(term)
    except InvalidOperation:
        amount = None
    if amount is not None and amount.is_finite():
        condition |= Q(amount=amount)
    return qs.filter(condition)


class ExpenseViewSet(
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """Expense claims: submitted by employees, decided by HR administrators."""

    serializer_class = ExpenseSerializer
    queryset = Expense.objects.select_related("employee", "reviewed_by")
    parser_classes = [JSONParser, MultiPartParser, FormParser]
    filterset_fields = ["status", "employee", "expense_date"]
    ordering_fields = ["created_at", "expense_date", "amount", "status"]
    pagination_class = StandardResultsSetPagination

    def get_permissions(self):
        if self.action in ("approve", "reject"):
            return [IsAuthenticated(), IsHRAdmin()]
        if self.action == "create":
            return [IsAuthenticated(), IsLinkedEmployeeOrHRAdmin()]
        return [IsAuthenticated()]

    def get_queryset(self):
        qs = scope_to_user(super().get_queryset(), self.request.user)
        return _search_expenses(qs, self.request.query_params.get("search"))

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        if is_hr_admin(request.user):
            employee = data.get("employee")
            if employee is None:
                raise ValidationError({"employee": "Ce champ est obligatoire."})
        else:
            employee = Employee.objects.filter(pk=linked_employee_id(request.user)).first()
            if employee is None:
                raise ValidationError({"employee": "Votre compte n'est lie a aucun employe."})

        try:
            expense = create_expense(
                employee=employee,
                amount=data["amount"],
                description=data["description"],
                expense_date=data.get("expense_date"),
                receipt=data.get("receipt"),
            )
        except ValueError as exc:
            raise ValidationError({"detail": str(exc)})
        return Response(self.get_serializer(expense).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"])
    def approve(self, request, pk=None):
        expense = self.get_object()
        payload = ExpenseApproveSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        try:
            expense = approve_expense(
                expense,
                reviewer=request.user,
                reimbursement_file=payload.validated_data.get("reimbursement_file"),
                reimbursement_details=payload.validated_data.get("reimbursement_details", ""),
            )
        except ValueError as exc:
            raise ValidationError({"detail": str(exc)})
        return Response(self.get_serializer(expense).data)

    @action(detail=True, methods=["post"])
    def reject(self, request, pk=None):
        expense = self.get_object()
        payload = ExpenseRejectSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        try:
            expense = reject_expense(
                expense,
                reviewer=request.user,
                reason=payload.validated_data["rejection_reason"],
            )
        except ValueError as exc:
            raise ValidationError({"detail": str(exc)})
        return Response(self.get_serializer(expense).data)

    @action(detail=False, methods=["get"])
    def stats(self, request):
        return Response(expense_stats(self.get_queryset()))
