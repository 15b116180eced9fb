"""Pay status flags and the pay ledger."""
import uuid
from decimal import Decimal

from django.conf import settings
from django.db import models
from django.utils import timezone


class PayStatus(models.Model):
    """Whether a member has been paid for their work on a project."""

    project = models.ForeignKey(
        "projects.Project",
        on_delete=models.CASCADE,
        related_name="pay_statuses",
    )
    member = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="pay_statuses",
    )
    paid = models.BooleanField(default=False)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "pay status"
        verbose_name_plural = "pay statuses"
        constraints = [
            models.UniqueConstraint(fields=["project", "member"], name="uniq_pay_status_project_member"),
        ]

    @property
    def key(self) -> str:
        return f"{self.project_id}_{self.member_id}"


class ProfitShareStatus(models.Model):
    """Whether a member's profit share for a quarter (``YYYY-Qn``) was paid."""

    quarter_key = models.CharField(max_length=20)
    member = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="profit_share_statuses",
    )
    paid = models.BooleanField(default=False)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "profit share status"
        verbose_name_plural = "profit share statuses"
        constraints = [
            models.UniqueConstraint(fields=["quarter_key", "member"], name="uniq_ps_status_quarter_member"),
        ]

    @property
    def key(self) -> str:
        return f"{self.quarter_key}_{self.member_id}"


class PayLogEntry(models.Model):
    """One payout event.

    Automatic entries (``is_manual=False``) mirror a pay or profit share
    status toggle and only disappear when that toggle is reversed. Manual
    entries can be deleted by an admin.
    """

    class PayType(models.TextChoices):
        PROJECT = "project", "Project pay"
        PROFIT_SHARE = "profit_share", "Profit share"
        BONUS = "bonus", "Bonus"
        REIMBURSEMENT = "reimbursement", "Reimbursement"
        OTHER = "other", "Other"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    member = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="pay_log_entries",
    )
    member_name = models.CharField(max_length=150)
    pay_type = models.CharField(max_length=20, choices=PayType.choices)
    amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    project = models.ForeignKey(
        "projects.Project",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="pay_log_entries",
    )
    quarter_key = models.CharField(max_length=20, blank=True, null=True)
    note = models.TextField(blank=True, default="")
    created_by_id = models.UUIDField(null=True, blank=True)
    created_by_name = models.CharField(max_length=150, blank=True, default="")
    paid_at = models.DateTimeField(default=timezone.now, db_index=True)
    is_manual = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = "pay log entry"
        verbose_name_plural = "pay log"
        ordering = ["-paid_at", "-created_at"]
        indexes = [
            models.Index(fields=["member", "paid_at"], name="paylog_member_paid_idx"),
        ]

    def __str__(self):
        return f"{self.member_name} {self.get_pay_type_display()} {self.amount}"
