"""Audit trail recording.

Audit rows are observability, not part of the business transaction: callers
record them after their own atomic block has committed (or after a refused
mutation), and a failure to record is logged, never raised.
"""
from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from typing import Any

from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder
from django.db import transaction

from audit.models import AuditLog

logger = logging.getLogger("agency")

UNKNOWN_ACTOR = "unknown"


def actor_identity(actor) -> tuple[str | None, str]:
    """Return ``(actor_id, actor_name)`` for a member, a token payload or nothing."""
    if actor is None:
        return None, UNKNOWN_ACTOR
    if isinstance(actor, Mapping):
        actor_id = actor.get("id") or actor.get("sub")
        name = actor.get("name")
    else:
        actor_id = getattr(actor, "pk", None)
        name = getattr(actor, "name", None)
    return (str(actor_id) if actor_id else None), (name or UNKNOWN_ACTOR)


def snapshot(instance, fields: Iterable[str]) -> dict[str, Any]:
    """Capture the current value of ``fields`` on a model instance."""
    return {field: getattr(instance, field) for field in fields}


def diff_fields(
    before: Mapping[str, Any],
    after: Mapping[str, Any],
    fields: Iterable[str] | None = None,
) -> dict[str, dict[str, Any]]:
    """Field-by-field diff of two snapshots: ``{field: {"from": old, "to": new}}``.

    Values are compared as Python values, so ``Decimal("10")`` and
    ``Decimal("10.00")`` are equal and JSON lists compare element-wise.
    """
    changes = {}
    for field in fields if fields is not None else before.keys():
        old, new = before.get(field), after.get(field)
        if old != new:
            changes[field] = {"from": old, "to": new}
    return changes


def _json_safe(value):
    return json.loads(json.dumps(value, cls=DjangoJSONEncoder))


def build_audit_payload(actor, action: str, table_name: str, record_id, changes=None) -> dict:
    actor_id, actor_name = actor_identity(actor)
    return {
        "actor_id": actor_id,
        "actor_name": actor_name,
        "action": action,
        "table_name": table_name,
        "record_id": "" if record_id is None else str(record_id),
        "changes": _json_safe(changes) if changes is not None else None,
    }


def write_audit_entry(payload: Mapping[str, Any]) -> AuditLog:
    """Insert one audit row. Raises on storage failure."""
    return AuditLog.objects.create(**payload)


def record_audit(actor, action: str, table_name: str, record_id, changes=None) -> None:
    """Best-effort append of an audit row.

    With ``AUDIT_LOG_ASYNC`` the row is handed to a Celery worker; otherwise
    it is written inline inside its own savepoint so a failing insert cannot
    poison an enclosing transaction.
    """
    if getattr(settings, "AUDIT_LOG_ASYNC", False):
        from audit.tasks import write_audit_log

        try:
            write_audit_log.delay(build_audit_payload(actor, action, table_name, record_id, changes))
        except Exception:
            logger.warning(
                "Could not queue audit log %s on %s #%s",
                action, table_name, record_id,
                exc_info=True,
            )
        return

    try:
        payload = build_audit_payload(actor, action, table_name, record_id, changes)
        with transaction.atomic():
            write_audit_entry(payload)
    except Exception:
        logger.warning(
            "Could not write audit log %s on %s #%s",
            action, table_name, record_id,
            exc_info=True,
        )
