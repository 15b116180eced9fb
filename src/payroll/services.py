"""Business services for the pay ledger and pay/profit share status flags.

Status toggles lock the member row before touching the flag, so a toggle and
a concurrent profit share percentage edit on the same member serialize.
"""
from __future__ import annotations

import logging
from decimal import Decimal

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import transaction

from audit.services import actor_identity, record_audit
from core.exceptions import AutoEntryImmutable
from payroll.models import PayLogEntry, PayStatus, ProfitShareStatus

logger = logging.getLogger("agency")

TABLE_NAME = "pay_log"

REQUIRED_ENTRY_FIELDS = ("member", "pay_type", "amount")


def _insert_entry(entry: dict, actor, *, is_manual: bool) -> PayLogEntry:
    member = entry["member"]
    created_by_id, created_by_name = actor_identity(actor)
    return PayLogEntry.objects.create(
        member=member,
        member_name=entry.get("member_name") or member.name,
        pay_type=entry["pay_type"],
        amount=entry["amount"],
        project=entry.get("project"),
        quarter_key=entry.get("quarter_key"),
        note=entry.get("note") or "",
        created_by_id=created_by_id,
        created_by_name=created_by_name,
        is_manual=is_manual,
        **({"paid_at": entry["paid_at"]} if entry.get("paid_at") else {}),
    )


def _audit_entry(entry: PayLogEntry, actor) -> None:
    record_audit(
        actor,
        "PAY_LOG_ENTRY",
        TABLE_NAME,
        entry.pk,
        {
            "member": entry.member_name,
            "type": entry.pay_type,
            "amount": entry.amount,
            "isManual": entry.is_manual,
        },
    )


# ---------------------------------------------------------------------------
# Ledger
# ---------------------------------------------------------------------------

def record_payment(entry: dict, actor, *, is_manual: bool = True) -> PayLogEntry:
    """Append a payout to the ledger.

    ``entry`` must carry ``member``, ``pay_type`` and ``amount``. Zero and
    negative amounts are accepted (corrections).

    Raises
    ------
    ValueError
        If a required field is missing.
    """
    missing = [field for field in REQUIRED_ENTRY_FIELDS if entry.get(field) is None]
    if missing:
        raise ValueError("member, type and amount are required")

    with transaction.atomic():
        created = _insert_entry(entry, actor, is_manual=is_manual)

    _audit_entry(created, actor)
    logger.info(
        "Pay log entry %s: %s %s for %s",
        created.pk, created.pay_type, created.amount, created.member_name,
    )
    return created


def delete_payment(entry: PayLogEntry, actor) -> None:
    """Delete a manual ledger entry.

    Raises
    ------
    AutoEntryImmutable
        If the entry was generated by a status toggle.
    """
    with transaction.atomic():
        current = PayLogEntry.objects.select_for_update().get(pk=entry.pk)
        if not current.is_manual:
            raise AutoEntryImmutable()
        entry_id, member_name, amount = current.pk, current.member_name, current.amount
        current.delete()

    record_audit(actor, "DELETE_PAY_LOG", TABLE_NAME, entry_id, {"member": member_name, "amount": amount})
    logger.info("Pay log entry %s deleted by %s", entry_id, actor)


def list_recent(limit: int | None = None):
    """Newest ledger entries first, by payment date."""
    if limit is None:
        limit = settings.PAY_LOG_API_LIMIT
    return PayLogEntry.objects.order_by("-paid_at", "-created_at")[:limit]


# ---------------------------------------------------------------------------
# Status flags
# ---------------------------------------------------------------------------

def pay_status_map() -> dict[str, bool]:
    """``{"<projectId>_<memberId>": paid}`` for every pay status row."""
    return {row.key: row.paid for row in PayStatus.objects.all()}


def profit_share_status_map() -> dict[str, bool]:
    """``{"<quarterKey>_<memberId>": paid}`` for every profit share row."""
    return {row.key: row.paid for row in ProfitShareStatus.objects.all()}


def _toggle(model, lookup: dict, member, paid: bool, amount, actor, *, pay_type, action, table_name):
    """Upsert a status flag and keep the automatic ledger entries in step.

    false -> true appends one automatic entry; true -> false removes the
    automatic entries generated for the same key.
    """
    paid = bool(paid)
    entry = None
    removed = 0

    with transaction.atomic():
        locked_member = get_user_model().objects.select_for_update().get(pk=member.pk)
        status, _created = model.objects.select_for_update().get_or_create(
            member=locked_member, defaults={"paid": False}, **lookup
        )
        previous = status.paid
        if previous != paid:
            status.paid = paid
            status.save(update_fields=["paid", "updated_at"])
            if paid:
                entry = _insert_entry(
                    {
                        "member": locked_member,
                        "pay_type": pay_type,
                        "amount": Decimal("0") if amount is None else amount,
                        **lookup,
                    },
                    actor,
                    is_manual=False,
                )
            else:
                removed, _ = PayLogEntry.objects.filter(
                    member=locked_member, pay_type=pay_type, is_manual=False, **lookup
                ).delete()

    if previous != paid:
        record_audit(
            actor,
            action,
            table_name,
            status.key,
            {"member": locked_member.name, "from": previous, "to": paid},
        )
        if entry is not None:
            _audit_entry(entry, actor)
        if removed:
            logger.info("Removed %s automatic pay log entries for %s", removed, status.key)
    return status


def set_pay_status(project, member, paid: bool, amount=None, actor=None) -> PayStatus:
    """Mark a member as paid (or unpaid) for a project."""
    return _toggle(
        PayStatus,
        {"project": project},
        member,
        paid,
        amount,
        actor,
        pay_type=PayLogEntry.PayType.PROJECT,
        action="PAY_STATUS_CHANGE",
        table_name="pay_status",
    )


def set_profit_share_status(quarter_key: str, member, paid: bool, amount=None, actor=None) -> ProfitShareStatus:
    """Mark a member's profit share for ``quarter_key`` as paid (or unpaid).

    Once any quarter is paid, the member's profit share percentage is
    locked; see :func:`core.locks.profit_share_locked`.
    """
    return _toggle(
        ProfitShareStatus,
        {"quarter_key": quarter_key},
        member,
        paid,
        amount,
        actor,
        pay_type=PayLogEntry.PayType.PROFIT_SHARE,
        action="PS_STATUS_CHANGE",
        table_name="profit_share_status",
    )
