"""ViewSets and endpoints for the v1 API.

Views stay thin: they validate the payload, call the service layer and
translate domain exceptions into DRF exceptions. Rendering of every error
as ``{"error": ...}`` is done by ``core.exceptions.api_exception_handler``.
"""
from __future__ import annotations

from django.conf import settings
from django.core.exceptions import ObjectDoesNotExist
from django.utils import timezone
from rest_framework import mixins, status, viewsets
from rest_framework.exceptions import AuthenticationFailed, NotFound, PermissionDenied, ValidationError
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts import services as account_services
from accounts.models import TeamMember
from api.v1.filters import AuditLogFilter
from api.v1.permissions import CanDeleteRecords, IsAdminRole
from api.v1.serializers import (
    AuditLogSerializer,
    DealSerializer,
    ExpenseSerializer,
    LoginSerializer,
    PayLogEntrySerializer,
    PayStatusToggleSerializer,
    ProfitShareToggleSerializer,
    ProjectSerializer,
    RosterSerializer,
    TaskSerializer,
    TeamMemberSerializer,
)
from audit.models import AuditLog
from core.exceptions import LockViolation, PinLoginError
from deals import services as deal_services
from deals.models import Deal
from payroll import services as payroll_services
from payroll.models import PayLogEntry
from projects import services as project_services
from projects.models import Expense, Project, Task

OK = {"ok": True}


def _call_service(func, *args, **kwargs):
    """Run a service call, mapping domain errors onto HTTP errors."""
    try:
        return func(*args, **kwargs)
    except LockViolation as exc:
        raise PermissionDenied(str(exc))
    except ObjectDoesNotExist:
        raise NotFound()
    except ValueError as exc:
        raise ValidationError({"detail": str(exc)})


class ServiceModelViewSet(viewsets.ModelViewSet):
    """ModelViewSet whose writes go through a service module.

    Subclasses set ``create_service``, ``update_service`` and
    ``delete_service``; each is called with the validated payload (or the
    instance) and the requesting member as actor.
    """

    http_method_names = ["get", "post", "patch", "delete", "head", "options"]
    create_service = None
    update_service = None
    delete_service = None

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        instance = _call_service(type(self).create_service, serializer.validated_data, request.user)
        return Response(self.get_serializer(instance).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, *args, **kwargs):
        instance = self.get_object()
        serializer = self.get_serializer(instance, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        instance = _call_service(type(self).update_service, instance, serializer.validated_data, request.user)
        return Response(self.get_serializer(instance).data)

    def destroy(self, request, *args, **kwargs):
        instance = self.get_object()
        _call_service(type(self).delete_service, instance, request.user)
        return Response(OK)


# ---------------------------------------------------------------------------
# Public endpoints
# ---------------------------------------------------------------------------

class HealthView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request):
        return Response({"ok": True, "ts": timezone.now().isoformat()})


class LoginView(APIView):
    """Exchange a member id and PIN for a bearer token."""

    permission_classes = [AllowAny]
    throttle_scope = "pin_login"

    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            member = account_services.authenticate_pin(
                serializer.validated_data.get("memberId"),
                serializer.validated_data.get("pin"),
            )
        except ValueError as exc:
            raise ValidationError({"detail": str(exc)})
        except PinLoginError as exc:
            if exc.status_code == status.HTTP_403_FORBIDDEN:
                raise PermissionDenied(str(exc))
            raise AuthenticationFailed(str(exc))

        return Response({
            "token": account_services.issue_token(member),
            "member": {
                "id": str(member.pk),
                "name": member.name,
                "authRole": member.auth_role,
                "color": member.color,
            },
        })


# ---------------------------------------------------------------------------
# Bootstrap
# ---------------------------------------------------------------------------

class BootstrapView(APIView):
    """All client state in one payload, fetched once after login."""

    def get(self, request):
        return Response({
            "team": TeamMemberSerializer(TeamMember.objects.order_by("name"), many=True).data,
            "deals": DealSerializer(Deal.objects.order_by("-created_at"), many=True).data,
            "projects": ProjectSerializer(Project.objects.order_by("-created_at"), many=True).data,
            "tasks": TaskSerializer(Task.objects.order_by("-created_at"), many=True).data,
            "expenses": ExpenseSerializer(Expense.objects.order_by("-date", "-created_at"), many=True).data,
            "payStatus": payroll_services.pay_status_map(),
            "profitSharePaidStatus": payroll_services.profit_share_status_map(),
        })


# ---------------------------------------------------------------------------
# Team
# ---------------------------------------------------------------------------

class TeamMemberViewSet(ServiceModelViewSet):
    """Roster listing is public (login screen); edits are admin only."""

    queryset = TeamMember.objects.order_by("name")
    serializer_class = TeamMemberSerializer
    update_service = account_services.update_member
    delete_service = account_services.delete_member

    def get_permissions(self):
        if self.action == "list":
            return [AllowAny()]
        if self.action == "retrieve":
            return [IsAuthenticated()]
        return [IsAuthenticated(), IsAdminRole()]

    def get_serializer_class(self):
        if self.action == "list":
            return RosterSerializer
        return TeamMemberSerializer

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        fields = dict(serializer.validated_data)
        pin = fields.pop("pin", None)
        member = _call_service(account_services.create_member, fields, pin, request.user)
        return Response(self.get_serializer(member).data, status=status.HTTP_201_CREATED)


# ---------------------------------------------------------------------------
# Pipeline and delivery
# ---------------------------------------------------------------------------

class DealViewSet(ServiceModelViewSet):
    queryset = Deal.objects.order_by("-created_at")
    serializer_class = DealSerializer
    filterset_fields = ["stage", "invoice_status"]
    create_service = deal_services.create_deal
    update_service = deal_services.update_deal
    delete_service = deal_services.delete_deal

    def get_permissions(self):
        if self.action in ("list", "retrieve"):
            return [IsAuthenticated()]
        if self.action == "destroy":
            return [IsAuthenticated(), CanDeleteRecords()]
        return [IsAuthenticated(), IsAdminRole()]


class ProjectViewSet(ServiceModelViewSet):
    queryset = Project.objects.select_related("deal").order_by("-created_at")
    serializer_class = ProjectSerializer
    filterset_fields = ["status", "archived", "deal"]
    http_method_names = ["get", "post", "patch", "head", "options"]
    create_service = project_services.create_project
    update_service = project_services.update_project

    def get_permissions(self):
        if self.action in ("list", "retrieve"):
            return [IsAuthenticated()]
        return [IsAuthenticated(), IsAdminRole()]


class TaskViewSet(ServiceModelViewSet):
    queryset = Task.objects.select_related("project", "assignee").order_by("-created_at")
    serializer_class = TaskSerializer
    filterset_fields = ["project", "assignee", "status"]
    create_service = project_services.create_task
    update_service = project_services.update_task
    delete_service = project_services.delete_task

    def get_permissions(self):
        if self.action == "destroy":
            return [IsAuthenticated(), CanDeleteRecords()]
        return [IsAuthenticated()]


class ExpenseViewSet(ServiceModelViewSet):
    queryset = Expense.objects.select_related("project", "submitted_by").order_by("-date", "-created_at")
    serializer_class = ExpenseSerializer
    filterset_fields = ["project", "category", "payment_type", "reimbursed"]
    create_service = project_services.create_expense
    update_service = project_services.update_expense
    delete_service = project_services.delete_expense

    def get_permissions(self):
        if self.action == "destroy":
            return [IsAuthenticated(), CanDeleteRecords()]
        return [IsAuthenticated()]


# ---------------------------------------------------------------------------
# Payroll
# ---------------------------------------------------------------------------

class PayLogViewSet(
    mixins.ListModelMixin,
    mixins.CreateModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """Admin-only pay ledger: newest entries, manual entry, manual delete."""

    queryset = PayLogEntry.objects.all()
    serializer_class = PayLogEntrySerializer
    permission_classes = [IsAuthenticated, IsAdminRole]

    def list(self, request, *args, **kwargs):
        entries = payroll_services.list_recent(settings.PAY_LOG_API_LIMIT)
        return Response(self.get_serializer(entries, many=True).data)

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        entry = _call_service(payroll_services.record_payment, serializer.validated_data, request.user)
        return Response(self.get_serializer(entry).data, status=status.HTTP_201_CREATED)

    def destroy(self, request, *args, **kwargs):
        entry = self.get_object()
        _call_service(payroll_services.delete_payment, entry, request.user)
        return Response(OK)


class PayStatusView(APIView):
    """``GET`` the ``projectId_memberId -> paid`` map, ``POST`` a toggle."""

    def get_permissions(self):
        if self.request.method == "POST":
            return [IsAuthenticated(), IsAdminRole()]
        return [IsAuthenticated()]

    def get(self, request):
        return Response(payroll_services.pay_status_map())

    def post(self, request):
        serializer = PayStatusToggleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        _call_service(
            payroll_services.set_pay_status,
            data["projectId"],
            data["memberId"],
            data["paid"],
            amount=data.get("amount"),
            actor=request.user,
        )
        return Response(OK)


class ProfitShareStatusView(APIView):
    """``GET`` the ``quarterKey_memberId -> paid`` map, ``POST`` a toggle."""

    def get_permissions(self):
        if self.request.method == "POST":
            return [IsAuthenticated(), IsAdminRole()]
        return [IsAuthenticated()]

    def get(self, request):
        return Response(payroll_services.profit_share_status_map())

    def post(self, request):
        serializer = ProfitShareToggleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        _call_service(
            payroll_services.set_profit_share_status,
            data["quarterKey"],
            data["memberId"],
            data["paid"],
            amount=data.get("amount"),
            actor=request.user,
        )
        return Response(OK)


# ---------------------------------------------------------------------------
# Audit
# ---------------------------------------------------------------------------

class AuditLogViewSet(viewsets.ReadOnlyModelViewSet):
    """Newest audit rows first, bounded by ``AUDIT_LOG_API_LIMIT``."""

    queryset = AuditLog.objects.order_by("-created_at", "-id")
    serializer_class = AuditLogSerializer
    permission_classes = [IsAuthenticated, IsAdminRole]
    filterset_class = AuditLogFilter

    def list(self, request, *args, **kwargs):
        entries = self.filter_queryset(self.get_queryset())[: settings.AUDIT_LOG_API_LIMIT]
        return Response(self.get_serializer(entries, many=True).data)
