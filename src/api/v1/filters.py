import django_filters

from audit.models import AuditLog


class AuditLogFilter(django_filters.FilterSet):
    """Query-string filters for the audit log endpoint."""

    created_after = django_filters.IsoDateTimeFilter(field_name="created_at", lookup_expr="gte")
    created_before = django_filters.IsoDateTimeFilter(field_name="created_at", lookup_expr="lte")

    class Meta:
        model = AuditLog
        fields = ["action", "table_name", "record_id", "actor_id"]
