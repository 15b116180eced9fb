"""Celery tasks for the audit app."""
from __future__ import annotations

import logging

from celery import shared_task

from audit.services import write_audit_entry

logger = logging.getLogger("agency")


@shared_task(name="audit.tasks.write_audit_log", ignore_result=True)
def write_audit_log(payload: dict):
    """Persist an audit row queued by :func:`audit.services.record_audit`."""
    entry = write_audit_entry(payload)
    logger.debug("Audit log %s written (%s on %s)", entry.pk, entry.action, entry.table_name)
    return entry.pk
