"""Business services for projects, tasks and expenses.

Only task hours carry a lock: once a project is complete and its deal has
been paid, ``est_hours`` on its tasks is frozen. Everything else here is
plain create/update/delete.
"""
from __future__ import annotations

import logging
from decimal import Decimal

from django.db import transaction

from audit.services import record_audit
from core.exceptions import TaskHoursLocked
from core.locks import task_hours_locked
from deals.models import Deal
from projects.models import Expense, Project, Task

logger = logging.getLogger("agency")

PROJECT_FIELDS = ("name", "client", "deal", "start_date", "end_date", "status", "archived")
TASK_FIELDS = ("title", "project", "assignee", "due_date", "priority", "status", "est_hours")
EXPENSE_FIELDS = (
    "description",
    "amount",
    "project",
    "category",
    "date",
    "submitted_by",
    "receipt_url",
    "payment_type",
    "reimbursed",
)


def _pick(fields: dict, allowed) -> dict:
    return {key: value for key, value in fields.items() if key in allowed}


def _apply(instance, changes: dict):
    for field, value in changes.items():
        setattr(instance, field, value)
    instance.save(update_fields=[*changes, "updated_at"])
    return instance


# ---------------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------------

def create_project(fields: dict, actor) -> Project:
    data = _pick(fields, PROJECT_FIELDS)
    data.setdefault("status", Project.Status.ACTIVE)
    data["archived"] = False
    project = Project.objects.create(**data)
    logger.info("Project %s created by %s", project.pk, actor)
    return project


def update_project(project: Project, changes: dict, actor) -> Project:
    changes = _pick(changes, PROJECT_FIELDS)
    with transaction.atomic():
        current = Project.objects.select_for_update().get(pk=project.pk)
        return _apply(current, changes)


# ---------------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------------

def create_task(fields: dict, actor) -> Task:
    data = _pick(fields, TASK_FIELDS)
    if data.get("est_hours") is None:
        data["est_hours"] = Decimal("0")
    task = Task.objects.create(**data)
    logger.info("Task %s created by %s", task.pk, actor)
    return task


def _hours_locked_project(project_id):
    """Lock a project and its deal; return the project if its task hours are frozen."""
    project = Project.objects.select_for_update().get(pk=project_id)
    deal = None
    if project.deal_id:
        deal = Deal.objects.select_for_update().filter(pk=project.deal_id).first()
    return project if task_hours_locked(project, deal) else None


def update_task(task: Task, changes: dict, actor) -> Task:
    """Apply a partial update to a task.

    When the payload carries ``est_hours``, the task's current project and,
    if the payload moves the task, the destination project are locked and
    checked together with their deals.

    Raises
    ------
    TaskHoursLocked
        If either project is complete and its deal is paid.
    """
    changes = _pick(changes, TASK_FIELDS)

    with transaction.atomic():
        current = Task.objects.select_for_update().get(pk=task.pk)
        locked_project = None
        if "est_hours" in changes:
            project_ids = [current.project_id]
            destination = changes.get("project")
            if destination is not None and destination.pk != current.project_id:
                project_ids.append(destination.pk)
            for project_id in project_ids:
                locked_project = _hours_locked_project(project_id)
                if locked_project is not None:
                    break
        if locked_project is None:
            _apply(current, changes)

    if locked_project is not None:
        record_audit(
            actor,
            "BLOCKED_EDIT_TASK_HOURS",
            "tasks",
            current.pk,
            {
                "title": current.title,
                "project": str(locked_project.pk),
                "from": current.est_hours,
                "attempted": changes["est_hours"],
            },
        )
        logger.warning("Blocked hours edit on task %s by %s", current.pk, actor)
        raise TaskHoursLocked()

    return current


def delete_task(task: Task, actor) -> None:
    task_id = task.pk
    task.delete()
    logger.info("Task %s deleted by %s", task_id, actor)


# ---------------------------------------------------------------------------
# Expenses
# ---------------------------------------------------------------------------

def create_expense(fields: dict, actor) -> Expense:
    data = _pick(fields, EXPENSE_FIELDS)
    data.setdefault("category", Expense.Category.OTHER)
    data.setdefault("payment_type", Expense.PaymentType.COMPANY)
    data["reimbursed"] = False
    expense = Expense.objects.create(**data)
    logger.info("Expense %s (%s) created by %s", expense.pk, expense.amount, actor)
    return expense


def update_expense(expense: Expense, changes: dict, actor) -> Expense:
    changes = _pick(changes, EXPENSE_FIELDS)
    with transaction.atomic():
        current = Expense.objects.select_for_update().get(pk=expense.pk)
        return _apply(current, changes)


def delete_expense(expense: Expense, actor) -> None:
    expense_id = expense.pk
    expense.delete()
    logger.info("Expense %s deleted by %s", expense_id, actor)
