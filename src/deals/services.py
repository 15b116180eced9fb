"""Business services for the sales pipeline.

Every mutation reads the deal with ``select_for_update()`` inside one atomic
block, so the paid-lock check and the write see the same row version.
"""
from __future__ import annotations

import logging
from decimal import Decimal

from django.db import transaction

from audit.services import diff_fields, record_audit, snapshot
from core.exceptions import DealIsPaid, FinancialFieldsLocked
from core.locks import deal_is_locked
from deals.models import Deal

logger = logging.getLogger("agency")

TABLE_NAME = "deals"

FINANCIAL_FIELDS = frozenset({"value", "buckets", "prob"})

EDITABLE_FIELDS = (
    "name",
    "client",
    "value",
    "expenses",
    "stage",
    "owner",
    "close_date",
    "invoice_status",
    "amount_collected",
    "buckets",
    "prob",
)

# Applied when a field is missing or explicitly null on creation.
CREATE_DEFAULTS = {
    "expenses": lambda: Decimal("0.00"),
    "invoice_status": lambda: Deal.InvoiceStatus.NONE,
    "buckets": list,
    "prob": lambda: 0,
    "amount_collected": lambda: Decimal("0.00"),
}


def _editable(fields: dict) -> dict:
    return {key: value for key, value in fields.items() if key in EDITABLE_FIELDS}


# ---------------------------------------------------------------------------
# create_deal
# ---------------------------------------------------------------------------

def create_deal(fields: dict, actor) -> Deal:
    """Create a deal, filling unset financial fields with their defaults."""
    data = _editable(fields)
    for key, default in CREATE_DEFAULTS.items():
        if data.get(key) is None:
            data[key] = default()

    deal = Deal.objects.create(**data)

    record_audit(
        actor,
        "CREATE_DEAL",
        TABLE_NAME,
        deal.pk,
        {"name": deal.name, "value": deal.value, "stage": deal.stage},
    )
    logger.info("Deal %s created by %s", deal.pk, actor)
    return deal


# ---------------------------------------------------------------------------
# update_deal
# ---------------------------------------------------------------------------

def update_deal(deal: Deal, changes: dict, actor) -> Deal:
    """Apply a partial update to a deal.

    While the deal is paid, a payload touching ``value``, ``buckets`` or
    ``prob`` is refused as a whole. ``invoice_status`` always stays editable
    so that a paid deal can be unlocked.

    Raises
    ------
    FinancialFieldsLocked
        If the deal is paid and the payload touches a financial field.
    """
    changes = _editable(changes)
    attempted = sorted(FINANCIAL_FIELDS.intersection(changes))

    with transaction.atomic():
        current = Deal.objects.select_for_update().get(pk=deal.pk)
        blocked = bool(attempted) and deal_is_locked(current)
        if not blocked:
            before = snapshot(current, changes)
            for field, value in changes.items():
                setattr(current, field, value)
            current.save(update_fields=[*changes, "updated_at"])
            current.refresh_from_db()
            changed = diff_fields(before, snapshot(current, changes))

    if blocked:
        record_audit(
            actor,
            "BLOCKED_EDIT_PAID_DEAL",
            TABLE_NAME,
            current.pk,
            {
                "name": current.name,
                "fields": attempted,
                "attempted": {field: changes[field] for field in attempted},
            },
        )
        logger.warning(
            "Blocked edit of paid deal %s by %s (fields: %s)",
            current.pk, actor, ", ".join(attempted),
        )
        raise FinancialFieldsLocked(attempted)

    if changed:
        record_audit(actor, "EDIT_DEAL", TABLE_NAME, current.pk, changed)
    return current


# ---------------------------------------------------------------------------
# delete_deal
# ---------------------------------------------------------------------------

def delete_deal(deal: Deal, actor) -> None:
    """Delete a deal unless it has been paid.

    Linked projects keep existing with their deal reference cleared.

    Raises
    ------
    DealIsPaid
        If the deal's invoice status is ``paid``.
    """
    with transaction.atomic():
        current = Deal.objects.select_for_update().get(pk=deal.pk)
        deal_id, name = current.pk, current.name
        blocked = deal_is_locked(current)
        if not blocked:
            current.delete()

    if blocked:
        record_audit(actor, "BLOCKED_DELETE_PAID_DEAL", TABLE_NAME, deal_id, {"name": name})
        logger.warning("Blocked delete of paid deal %s by %s", deal_id, actor)
        raise DealIsPaid()

    record_audit(actor, "DELETE_DEAL", TABLE_NAME, deal_id, {"name": name})
    logger.info("Deal %s (%s) deleted by %s", deal_id, name, actor)
