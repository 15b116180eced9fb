"""Audit trail model."""
from django.core.serializers.json import DjangoJSONEncoder
from django.db import models


class AuditLog(models.Model):
    """Append-only record of an action taken (or attempted) against a record.

    The actor is stored as a plain id + name snapshot, not a foreign key, so
    deleting a team member never rewrites historical rows.
    """

    actor_id = models.UUIDField(null=True, blank=True, db_index=True)
    actor_name = models.CharField(max_length=150, default="unknown")
    action = models.CharField(max_length=100)
    table_name = models.CharField(max_length=100, db_index=True)
    record_id = models.CharField(max_length=255, blank=True, default="")
    changes = models.JSONField(null=True, blank=True, encoder=DjangoJSONEncoder)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        verbose_name = "audit log entry"
        verbose_name_plural = "audit log"
        indexes = [
            models.Index(fields=["action", "created_at"], name="audit_action_created_idx"),
            models.Index(fields=["table_name", "record_id"], name="audit_table_record_idx"),
        ]

    def __str__(self):
        return f"[{self.created_at}] {self.action} on {self.table_name} #{self.record_id}"
