import uuid
from decimal import Decimal

import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Deal",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                ("name", models.CharField(max_length=200, verbose_name="name")),
                ("client", models.CharField(blank=True, default="", max_length=200, verbose_name="client")),
                ("value", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14, verbose_name="value")),
                ("expenses", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14, verbose_name="expenses")),
                (
                    "stage",
                    models.CharField(
                        choices=[
                            ("Lead", "Lead"),
                            ("Qualified", "Qualified"),
                            ("Proposal", "Proposal"),
                            ("Negotiation", "Negotiation"),
                            ("Closed Won", "Closed Won"),
                        ],
                        default="Lead",
                        max_length=20,
                        verbose_name="stage",
                    ),
                ),
                ("owner", models.CharField(blank=True, default="", max_length=150, verbose_name="owner")),
                (
                    "close_date",
                    models.CharField(
                        blank=True,
                        max_length=7,
                        null=True,
                        validators=[django.core.validators.RegexValidator("^\\d{4}-\\d{2}$", "Use the YYYY-MM format.")],
                        verbose_name="close period",
                    ),
                ),
                (
                    "invoice_status",
                    models.CharField(
                        choices=[
                            ("none", "Not invoiced"),
                            ("sent", "Invoice sent"),
                            ("deposit", "Deposit received"),
                            ("paid", "Paid"),
                        ],
                        db_index=True,
                        default="none",
                        max_length=10,
                        verbose_name="invoice status",
                    ),
                ),
                (
                    "amount_collected",
                    models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14, verbose_name="amount collected"),
                ),
                (
                    "buckets",
                    models.JSONField(
                        blank=True,
                        default=list,
                        help_text="Ordered probability-weighted revenue allocation entries.",
                        verbose_name="revenue buckets",
                    ),
                ),
                (
                    "prob",
                    models.PositiveSmallIntegerField(
                        default=0,
                        validators=[
                            django.core.validators.MinValueValidator(0),
                            django.core.validators.MaxValueValidator(100),
                        ],
                        verbose_name="win probability",
                    ),
                ),
            ],
            options={
                "verbose_name": "deal",
                "verbose_name_plural": "deals",
                "ordering": ["-created_at"],
            },
        ),
    ]
