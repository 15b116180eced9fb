"""Models for projects and their tasks."""
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from core.models import TimeStampedModel


class Project(TimeStampedModel):
    """Delivery project, optionally born from a won deal."""

    class Status(models.TextChoices):
        ACTIVE = "active", "Active"
        COMPLETE = "complete", "Complete"
        ARCHIVED = "archived", "Archived"

    name = models.CharField("name", max_length=200)
    client = models.CharField("client", max_length=200, blank=True, default="")
    deal = models.ForeignKey(
        "deals.Deal",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="projects",
        verbose_name="deal",
    )
    start_date = models.DateField("start date", null=True, blank=True)
    end_date = models.DateField("end date", null=True, blank=True)
    status = models.CharField(
        "status",
        max_length=10,
        choices=Status.choices,
        default=Status.ACTIVE,
        db_index=True,
    )
    archived = models.BooleanField("archived", default=False)

    class Meta:
        verbose_name = "project"
        verbose_name_plural = "projects"
        ordering = ["-created_at"]

    def __str__(self):
        return self.name


class Task(TimeStampedModel):
    """A unit of work inside a project."""

    class Priority(models.TextChoices):
        HIGH = "high", "High"
        MEDIUM = "med", "Medium"
        LOW = "low", "Low"

    class Status(models.TextChoices):
        TODO = "todo", "To do"
        IN_PROGRESS = "progress", "In progress"
        REVIEW = "review", "In review"
        DONE = "done", "Done"

    title = models.CharField("title", max_length=255)
    project = models.ForeignKey(
        Project,
        on_delete=models.CASCADE,
        related_name="tasks",
        verbose_name="project",
    )
    assignee = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="tasks",
        verbose_name="assignee",
    )
    due_date = models.DateField("due date", null=True, blank=True)
    priority = models.CharField("priority", max_length=5, choices=Priority.choices, default=Priority.MEDIUM)
    status = models.CharField("status", max_length=10, choices=Status.choices, default=Status.TODO)
    est_hours = models.DecimalField(
        "estimated hours",
        max_digits=7,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0"))],
    )

    class Meta:
        verbose_name = "task"
        verbose_name_plural = "tasks"
        ordering = ["-created_at"]

    def __str__(self):
        return self.title


class Expense(TimeStampedModel):
    """Project expense, paid by the company or reimbursed to a member."""

    class Category(models.TextChoices):
        SOFTWARE = "software", "Software"
        CONTRACTOR = "contractor", "Contractor"
        ASSETS = "assets", "Assets"
        ADVERTISING = "advertising", "Advertising"
        PRINTING = "printing", "Printing"
        TRAVEL = "travel", "Travel"
        EQUIPMENT = "equipment", "Equipment"
        OTHER = "other", "Other"

    class PaymentType(models.TextChoices):
        COMPANY = "company", "Company card"
        REIMBURSEMENT = "reimbursement", "Reimbursement"

    description = models.CharField("description", max_length=255)
    amount = models.DecimalField("amount", max_digits=12, decimal_places=2)
    project = models.ForeignKey(
        Project,
        on_delete=models.CASCADE,
        related_name="expenses",
        verbose_name="project",
    )
    category = models.CharField("category", max_length=20, choices=Category.choices, default=Category.OTHER)
    date = models.DateField("date", default=timezone.localdate, db_index=True)
    submitted_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="submitted_expenses",
        verbose_name="submitted by",
    )
    receipt_url = models.URLField("receipt", max_length=500, blank=True, null=True)
    payment_type = models.CharField(
        "payment type",
        max_length=20,
        choices=PaymentType.choices,
        default=PaymentType.COMPANY,
    )
    reimbursed = models.BooleanField("reimbursed", default=False)

    class Meta:
        verbose_name = "expense"
        verbose_name_plural = "expenses"
        ordering = ["-date", "-created_at"]

    def __str__(self):
        return f"{self.description} - {self.amount}"
