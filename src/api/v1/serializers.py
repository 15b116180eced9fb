"""Serializers for the v1 API.

Field names on the wire are camelCase, mapped onto model fields with
``source=``. Views pass ``validated_data`` (model field names) straight to
the service layer.
"""
from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers

from accounts.models import TeamMember
from audit.models import AuditLog
from deals.models import Deal
from deals.services import CREATE_DEFAULTS
from payroll.models import PayLogEntry
from projects.models import Expense, Project, Task


# ---------------------------------------------------------------------------
# Team
# ---------------------------------------------------------------------------

class RosterSerializer(serializers.ModelSerializer):
    """Public login roster: no pay data, no PIN hash."""

    authRole = serializers.CharField(source="auth_role", read_only=True)
    active = serializers.BooleanField(source="is_active", read_only=True)

    class Meta:
        model = TeamMember
        fields = ["id", "name", "authRole", "color", "active"]
        read_only_fields = fields


class TeamMemberSerializer(serializers.ModelSerializer):
    profitSharePct = serializers.DecimalField(
        source="profit_share_pct",
        max_digits=5,
        decimal_places=2,
        min_value=0,
        max_value=100,
        required=False,
    )
    active = serializers.BooleanField(source="is_active", required=False)
    # Validated by accounts.services so the error reads "Invalid role".
    authRole = serializers.CharField(source="auth_role", required=False, allow_blank=True)
    pin = serializers.RegexField(r"^\d{4,12}$", write_only=True, required=False)

    class Meta:
        model = TeamMember
        fields = ["id", "name", "role", "color", "profitSharePct", "active", "authRole", "pin"]
        read_only_fields = ["id"]


class LoginSerializer(serializers.Serializer):
    memberId = serializers.CharField(required=False, allow_blank=True)
    pin = serializers.CharField(required=False, allow_blank=True)


# ---------------------------------------------------------------------------
# Pipeline and delivery
# ---------------------------------------------------------------------------

class DealSerializer(serializers.ModelSerializer):
    closeDate = serializers.RegexField(
        r"^\d{4}-\d{2}$",
        source="close_date",
        required=False,
        allow_null=True,
        allow_blank=True,
    )
    invoiceStatus = serializers.ChoiceField(
        source="invoice_status",
        choices=Deal.InvoiceStatus.choices,
        required=False,
        allow_null=True,
    )
    amountCollected = serializers.DecimalField(
        source="amount_collected",
        max_digits=14,
        decimal_places=2,
        required=False,
        allow_null=True,
    )
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = Deal
        fields = [
            "id",
            "name",
            "client",
            "value",
            "expenses",
            "stage",
            "owner",
            "closeDate",
            "invoiceStatus",
            "amountCollected",
            "buckets",
            "prob",
            "createdAt",
        ]
        read_only_fields = ["id", "createdAt"]
        extra_kwargs = {
            "expenses": {"allow_null": True},
            "buckets": {"allow_null": True},
            "prob": {"allow_null": True},
        }

    def validate_buckets(self, value):
        if value is not None and not isinstance(value, list):
            raise serializers.ValidationError("Buckets must be a list.")
        return value

    def validate_closeDate(self, value):
        return value or None

    def validate(self, attrs):
        # An explicit null resets a defaulted field, as on creation.
        for field, default in CREATE_DEFAULTS.items():
            if field in attrs and attrs[field] is None:
                attrs[field] = default()
        return attrs


class ProjectSerializer(serializers.ModelSerializer):
    dealId = serializers.PrimaryKeyRelatedField(
        source="deal",
        queryset=Deal.objects.all(),
        required=False,
        allow_null=True,
    )
    startDate = serializers.DateField(source="start_date", required=False, allow_null=True)
    endDate = serializers.DateField(source="end_date", required=False, allow_null=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = Project
        fields = ["id", "name", "dealId", "client", "startDate", "endDate", "status", "archived", "createdAt"]
        read_only_fields = ["id", "createdAt"]


class TaskSerializer(serializers.ModelSerializer):
    projectId = serializers.PrimaryKeyRelatedField(source="project", queryset=Project.objects.all())
    assigneeId = serializers.PrimaryKeyRelatedField(
        source="assignee",
        queryset=TeamMember.objects.all(),
        required=False,
        allow_null=True,
    )
    # Read back as "due", written as "dueDate".
    due = serializers.DateField(source="due_date", read_only=True)
    dueDate = serializers.DateField(source="due_date", write_only=True, required=False, allow_null=True)
    estHours = serializers.DecimalField(
        source="est_hours",
        max_digits=7,
        decimal_places=2,
        min_value=0,
        required=False,
        allow_null=True,
    )

    class Meta:
        model = Task
        fields = ["id", "title", "projectId", "assigneeId", "due", "dueDate", "priority", "status", "estHours"]
        read_only_fields = ["id"]

    def validate_estHours(self, value):
        return Decimal("0") if value is None else value


class ExpenseSerializer(serializers.ModelSerializer):
    projectId = serializers.PrimaryKeyRelatedField(source="project", queryset=Project.objects.all())
    submittedBy = serializers.PrimaryKeyRelatedField(
        source="submitted_by",
        queryset=TeamMember.objects.all(),
        required=False,
        allow_null=True,
    )
    paymentType = serializers.ChoiceField(
        source="payment_type",
        choices=Expense.PaymentType.choices,
        required=False,
    )
    receiptUrl = serializers.URLField(source="receipt_url", max_length=500, required=False, allow_null=True, allow_blank=True)

    class Meta:
        model = Expense
        fields = [
            "id",
            "description",
            "amount",
            "projectId",
            "category",
            "date",
            "submittedBy",
            "paymentType",
            "receiptUrl",
            "reimbursed",
        ]
        read_only_fields = ["id"]


# ---------------------------------------------------------------------------
# Payroll
# ---------------------------------------------------------------------------

class PayLogEntrySerializer(serializers.ModelSerializer):
    memberId = serializers.PrimaryKeyRelatedField(source="member", queryset=TeamMember.objects.all())
    memberName = serializers.CharField(source="member_name", max_length=150, required=False, allow_blank=True)
    payType = serializers.ChoiceField(source="pay_type", choices=PayLogEntry.PayType.choices)
    projectId = serializers.PrimaryKeyRelatedField(
        source="project",
        queryset=Project.objects.all(),
        required=False,
        allow_null=True,
    )
    quarterKey = serializers.CharField(source="quarter_key", max_length=20, required=False, allow_null=True, allow_blank=True)
    paidAt = serializers.DateTimeField(source="paid_at", required=False)
    isManual = serializers.BooleanField(source="is_manual", read_only=True)
    createdById = serializers.UUIDField(source="created_by_id", read_only=True)
    createdByName = serializers.CharField(source="created_by_name", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = PayLogEntry
        fields = [
            "id",
            "memberId",
            "memberName",
            "payType",
            "amount",
            "projectId",
            "quarterKey",
            "note",
            "paidAt",
            "isManual",
            "createdById",
            "createdByName",
            "createdAt",
        ]
        read_only_fields = ["id"]
        extra_kwargs = {
            "amount": {"required": True},
        }


class PayStatusToggleSerializer(serializers.Serializer):
    projectId = serializers.PrimaryKeyRelatedField(queryset=Project.objects.all())
    memberId = serializers.PrimaryKeyRelatedField(queryset=TeamMember.objects.all())
    paid = serializers.BooleanField()
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, allow_null=True)


class ProfitShareToggleSerializer(serializers.Serializer):
    quarterKey = serializers.CharField(max_length=20)
    memberId = serializers.PrimaryKeyRelatedField(queryset=TeamMember.objects.all())
    paid = serializers.BooleanField()
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, allow_null=True)


# ---------------------------------------------------------------------------
# Audit
# ---------------------------------------------------------------------------

class AuditLogSerializer(serializers.ModelSerializer):
    actorId = serializers.UUIDField(source="actor_id", read_only=True)
    actorName = serializers.CharField(source="actor_name", read_only=True)
    tableName = serializers.CharField(source="table_name", read_only=True)
    recordId = serializers.CharField(source="record_id", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = AuditLog
        fields = ["id", "actorId", "actorName", "action", "tableName", "recordId", "changes", "createdAt"]
        read_only_fields = fields
