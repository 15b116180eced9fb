"""Models for the sales pipeline."""
from decimal import Decimal

from django.core.validators import MaxValueValidator, MinValueValidator, RegexValidator
from django.db import models

from core.models import TimeStampedModel


class Deal(TimeStampedModel):
    """An opportunity in the sales pipeline.

    Once ``invoice_status`` reaches ``paid`` the financial fields
    (``value``, ``buckets``, ``prob``) are frozen until the status is moved
    back; see :mod:`deals.services`.
    """

    class Stage(models.TextChoices):
        LEAD = "Lead", "Lead"
        QUALIFIED = "Qualified", "Qualified"
        PROPOSAL = "Proposal", "Proposal"
        NEGOTIATION = "Negotiation", "Negotiation"
        CLOSED_WON = "Closed Won", "Closed Won"

    class InvoiceStatus(models.TextChoices):
        NONE = "none", "Not invoiced"
        SENT = "sent", "Invoice sent"
        DEPOSIT = "deposit", "Deposit received"
        PAID = "paid", "Paid"

    name = models.CharField("name", max_length=200)
    client = models.CharField("client", max_length=200, blank=True, default="")
    value = models.DecimalField("value", max_digits=14, decimal_places=2, default=Decimal("0.00"))
    expenses = models.DecimalField("expenses", max_digits=14, decimal_places=2, default=Decimal("0.00"))
    stage = models.CharField("stage", max_length=20, choices=Stage.choices, default=Stage.LEAD)
    owner = models.CharField("owner", max_length=150, blank=True, default="")
    close_date = models.CharField(
        "close period",
        max_length=7,
        null=True,
        blank=True,
        validators=[RegexValidator(r"^\d{4}-\d{2}$", "Use the YYYY-MM format.")],
    )
    invoice_status = models.CharField(
        "invoice status",
        max_length=10,
        choices=InvoiceStatus.choices,
        default=InvoiceStatus.NONE,
        db_index=True,
    )
    amount_collected = models.DecimalField(
        "amount collected",
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
    )
    buckets = models.JSONField(
        "revenue buckets",
        default=list,
        blank=True,
        help_text="Ordered probability-weighted revenue allocation entries.",
    )
    prob = models.PositiveSmallIntegerField(
        "win probability",
        default=0,
        validators=[MinValueValidator(0), MaxValueValidator(100)],
    )

    class Meta:
        verbose_name = "deal"
        verbose_name_plural = "deals"
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.name} ({self.get_invoice_status_display()})"
