import uuid
from decimal import Decimal

import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="TeamMember",
            fields=[
                ("password", models.CharField(max_length=128, verbose_name="password")),
                ("last_login", models.DateTimeField(blank=True, null=True, verbose_name="last login")),
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                (
                    "name",
                    models.CharField(
                        error_messages={"unique": "A team member with this name already exists."},
                        max_length=150,
                        unique=True,
                        verbose_name="name",
                    ),
                ),
                ("role", models.CharField(blank=True, default="", max_length=100, verbose_name="job title")),
                (
                    "auth_role",
                    models.CharField(
                        choices=[
                            ("admin", "Admin"),
                            ("class_a", "Class A"),
                            ("class_b", "Class B"),
                            ("va", "Virtual assistant"),
                        ],
                        db_index=True,
                        default="class_b",
                        max_length=20,
                        verbose_name="access level",
                    ),
                ),
                ("color", models.CharField(default="#c9a84c", max_length=20, verbose_name="color")),
                (
                    "profit_share_pct",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0"),
                        max_digits=5,
                        validators=[
                            django.core.validators.MinValueValidator(Decimal("0")),
                            django.core.validators.MaxValueValidator(Decimal("100")),
                        ],
                        verbose_name="profit share %",
                    ),
                ),
                ("is_active", models.BooleanField(default=True, verbose_name="active")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
            ],
            options={
                "verbose_name": "team member",
                "verbose_name_plural": "team members",
                "ordering": ["name"],
            },
        ),
    ]
