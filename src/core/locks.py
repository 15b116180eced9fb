"""Lock predicates for financial state.

Each predicate answers "may this record still be changed?" from state the
caller has already read. Callers read that state with ``select_for_update()``
inside the same transaction as the write, so the answer cannot go stale
between the check and the commit.
"""
from __future__ import annotations

PAID = "paid"
COMPLETE = "complete"


def deal_is_locked(deal) -> bool:
    """A deal is locked once its invoice has been paid."""
    return getattr(deal, "invoice_status", None) == PAID


def task_hours_locked(project, deal) -> bool:
    """Task hours freeze when the project is complete and its deal is paid.

    A project without a deal never locks its task hours.
    """
    if project is None or deal is None:
        return False
    return project.status == COMPLETE and deal_is_locked(deal)


def profit_share_locked(member) -> bool:
    """True once any profit share quarter has been paid out to ``member``."""
    from payroll.models import ProfitShareStatus

    return ProfitShareStatus.objects.filter(member=member, paid=True).exists()
