import uuid
from decimal import Decimal

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("projects", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="PayStatus",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("paid", models.BooleanField(default=False)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "member",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="pay_statuses",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "project",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="pay_statuses",
                        to="projects.project",
                    ),
                ),
            ],
            options={
                "verbose_name": "pay status",
                "verbose_name_plural": "pay statuses",
                "constraints": [
                    models.UniqueConstraint(fields=("project", "member"), name="uniq_pay_status_project_member"),
                ],
            },
        ),
        migrations.CreateModel(
            name="ProfitShareStatus",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("quarter_key", models.CharField(max_length=20)),
                ("paid", models.BooleanField(default=False)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "member",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="profit_share_statuses",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "profit share status",
                "verbose_name_plural": "profit share statuses",
                "constraints": [
                    models.UniqueConstraint(fields=("quarter_key", "member"), name="uniq_ps_status_quarter_member"),
                ],
            },
        ),
        migrations.CreateModel(
            name="PayLogEntry",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("member_name", models.CharField(max_length=150)),
                (
                    "pay_type",
                    models.CharField(
                        choices=[
                            ("project", "Project pay"),
                            ("profit_share", "Profit share"),
                            ("bonus", "Bonus"),
                            ("reimbursement", "Reimbursement"),
                            ("other", "Other"),
                        ],
                        max_length=20,
                    ),
                ),
                ("amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("quarter_key", models.CharField(blank=True, max_length=20, null=True)),
                ("note", models.TextField(blank=True, default="")),
                ("created_by_id", models.UUIDField(blank=True, null=True)),
                ("created_by_name", models.CharField(blank=True, default="", max_length=150)),
                ("paid_at", models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ("is_manual", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "member",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="pay_log_entries",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "project",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="pay_log_entries",
                        to="projects.project",
                    ),
                ),
            ],
            options={
                "verbose_name": "pay log entry",
                "verbose_name_plural": "pay log",
                "ordering": ["-paid_at", "-created_at"],
                "indexes": [
                    models.Index(fields=["member", "paid_at"], name="paylog_member_paid_idx"),
                ],
            },
        ),
    ]
